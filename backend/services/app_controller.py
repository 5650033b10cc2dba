# -*- coding: utf-8 -*-
"""
应用控制器 - Alba NihonGo
持有应用状态，处理 搜索 / 卡组 / 游戏 三个视图之间的切换以及查询、收藏流程
"""

import asyncio
import logging
import random
from typing import Callable, List, Optional, Sequence

from core.errors import ConnectivityError, NotEnoughCardsError
from models.app_state import AppState
from models.vocab_models import (
    DuplicatePolicy,
    SavedCard,
    SaveOutcome,
    ViewState,
    VocabularyData,
    same_headword,
)
from services.deck.collection_store import CollectionStore
from services.game.memory_game import MemoryGame
from services.word_lookup.dictionary_agent import DictionaryAgent

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Could not find a definition. Try a simpler word."
CONNECTIVITY_MESSAGE = "Error connecting to the dictionary service."

StateListener = Callable[[AppState], None]


class AppController:
    """
    应用控制器

    每次状态变化都会生成新的 AppState 快照并通知订阅者。
    卡组的唯一所有者，每次修改后显式写入存储。
    """

    def __init__(
        self,
        lookup_client: DictionaryAgent,
        store: CollectionStore,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.ALLOW,
        dictionary_ready: bool = True,
        game_pair_count: int = 6,
        game_flip_back_delay: float = 1.0,
        rng: Optional[random.Random] = None,
    ):
        """
        初始化控制器并从存储加载卡组

        Args:
            lookup_client: 词典查询客户端（需提供 async lookup(query)）
            store: 卡组存储
            duplicate_policy: 重复收藏策略
            dictionary_ready: 词典服务是否已配置
            game_pair_count: 记忆游戏的卡片数
            game_flip_back_delay: 记忆游戏翻回延迟（秒）
            rng: 记忆游戏使用的随机数生成器
        """
        self.lookup_client = lookup_client
        self.store = store
        self.duplicate_policy = DuplicatePolicy(duplicate_policy)
        self.game_pair_count = game_pair_count
        self.game_flip_back_delay = game_flip_back_delay
        self.rng = rng

        self.game: Optional[MemoryGame] = None
        self._generation = 0
        self._listeners: List[StateListener] = []

        cards = self.store.load()
        self._state = AppState(collection=tuple(cards), dictionary_ready=dictionary_ready)

    @property
    def state(self) -> AppState:
        """当前状态快照"""
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        订阅状态变化

        Returns:
            Callable: 取消订阅函数
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _update(self, **changes) -> AppState:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("❌ 状态订阅者处理失败")
        return self._state

    def _commit_collection(self, cards: Sequence[SavedCard]) -> AppState:
        """更新内存卡组并写入存储（写入失败时内存状态仍然有效）"""
        if not self.store.save(cards):
            logger.warning("⚠️ 卡组未能写入存储，本次会话内仍然有效")
        return self._update(collection=tuple(cards))

    # ============ 视图切换 ============

    def navigate(self, view: ViewState) -> AppState:
        """
        切换视图

        切换到游戏视图时用当前卡组开始新的游戏会话，卡片不足时不开始
        """
        view = ViewState(view)

        if view == ViewState.GAME:
            try:
                self.start_game()
            except NotEnoughCardsError as e:
                logger.info(f"ℹ️ {e}")

        return self._update(view=view)

    def start_game(self) -> MemoryGame:
        """
        用当前卡组快照开始新的记忆游戏

        Raises:
            NotEnoughCardsError: 卡片不足
        """
        if self.game is not None:
            self.game.cancel()
            self.game = None

        game = MemoryGame(
            self._state.collection,
            pair_count=self.game_pair_count,
            flip_back_delay=self.game_flip_back_delay,
            rng=self.rng,
        )
        game.start()
        self.game = game
        return game

    # ============ 搜索 ============

    def set_query(self, query: str) -> AppState:
        return self._update(query=query)

    async def submit_search(self, query: Optional[str] = None) -> AppState:
        """
        提交查询

        空查询直接忽略。新的查询会使之前未返回的查询结果作废。

        Args:
            query: 查询文本，默认使用状态中的 query

        Returns:
            AppState: 查询结束后的状态
        """
        if query is None:
            query = self._state.query
        trimmed = query.strip()
        if not trimmed:
            return self._state

        self._generation += 1
        generation = self._generation

        self._update(query=query, loading=True, error=None, current_card=None)

        try:
            entry = await self.lookup_client.lookup(trimmed)
        except asyncio.CancelledError:
            # 查询被取消时结束 loading 再继续抛出
            self._finish_search(generation)
            raise
        except ConnectivityError as e:
            return self._finish_search(generation, error=CONNECTIVITY_MESSAGE, reason=str(e))
        except Exception as e:
            logger.exception(f"❌ 查询单词异常: {trimmed}")
            return self._finish_search(generation, error=CONNECTIVITY_MESSAGE, reason=str(e))

        if entry is None:
            return self._finish_search(generation, error=NOT_FOUND_MESSAGE)

        return self._finish_search(generation, entry=entry)

    def _finish_search(
        self,
        generation: int,
        entry: Optional[VocabularyData] = None,
        error: Optional[str] = None,
        reason: str = "",
    ) -> AppState:
        if generation != self._generation:
            logger.info(f"ℹ️ 丢弃过期的查询结果 (第 {generation} 次查询)")
            return self._state

        if error is not None:
            logger.warning(f"⚠️ 查询失败: {error} {reason}".rstrip())
        return self._update(loading=False, current_card=entry, error=error)

    # ============ 卡组 ============

    def is_current_saved(self) -> bool:
        """当前查询结果是否已经收藏（汉字 + 第一个释义相同即视为已收藏）"""
        current = self._state.current_card
        if current is None:
            return False
        return any(same_headword(card, current) for card in self._state.collection)

    def save_current_card(self) -> SaveOutcome:
        """
        收藏当前查询结果

        重复卡片按 duplicate_policy 处理：
            allow - 仍然添加新卡片
            block - 不添加
            merge - 用新内容更新已有卡片
        """
        current = self._state.current_card
        if current is None:
            return SaveOutcome.NOTHING_TO_SAVE

        duplicate = self.store.find_duplicate(current)

        if duplicate is not None and self.duplicate_policy == DuplicatePolicy.BLOCK:
            logger.info(f"ℹ️ 卡片已在卡组中: {current.kanji}")
            return SaveOutcome.DUPLICATE_BLOCKED

        if duplicate is not None and self.duplicate_policy == DuplicatePolicy.MERGE:
            self._commit_collection(self.store.merge(duplicate.id, current))
            return SaveOutcome.MERGED

        self._commit_collection(self.store.append(current))
        return SaveOutcome.SAVED

    def set_favorite(self, card_id: str, value: bool) -> AppState:
        return self._commit_collection(self.store.set_favorite(card_id, value))

    def toggle_favorite(self, card_id: str) -> AppState:
        return self._commit_collection(self.store.toggle_favorite(card_id))

    def remove_card(self, card_id: str) -> AppState:
        """删除卡片"""
        if self.store.get(card_id) is None:
            return self._state
        return self._commit_collection(self.store.remove(card_id))
