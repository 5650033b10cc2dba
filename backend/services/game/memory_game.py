# -*- coding: utf-8 -*-
"""
记忆配对游戏 - Alba NihonGo
从卡组中选卡，每张卡生成 汉字牌 + 释义牌，翻牌配对

状态机：
    IDLE -> AWAITING_FIRST_PICK -> AWAITING_SECOND_PICK
         -> (RESOLVING -> AWAITING_FIRST_PICK) -> COMPLETE
"""

import asyncio
import logging
import random
from typing import Dict, List, Optional, Sequence

from core.errors import NotEnoughCardsError
from models.game_models import GamePhase, GameSnapshot, GameTile, TileKind, TileState, TileView
from models.vocab_models import SavedCard, first_sense

logger = logging.getLogger(__name__)

MIN_PAIRS = 2


def meaning_face(card: SavedCard) -> str:
    """释义牌内容：第一个释义，没有释义时用假名"""
    return first_sense(card) or card.kana


def select_distinct_cards(collection: Sequence[SavedCard]) -> List[SavedCard]:
    """
    挑选牌面互不相同的卡片，保留卡组顺序

    配对以卡片为准，所以汉字牌或释义牌与已选卡片相同的卡片会被跳过，
    否则玩家无法区分两张一样的牌。
    """
    kanji_faces = set()
    meaning_faces = set()
    distinct = []
    for card in collection:
        meaning = meaning_face(card)
        if card.kanji in kanji_faces or meaning in meaning_faces:
            continue
        kanji_faces.add(card.kanji)
        meaning_faces.add(meaning)
        distinct.append(card)
    return distinct



class MemoryGame:
    """记忆配对游戏会话"""

    def __init__(
        self,
        collection: Sequence[SavedCard],
        pair_count: int = 6,
        flip_back_delay: float = 1.0,
        rng: Optional[random.Random] = None,
    ):
        """
        初始化游戏会话

        Args:
            collection: 卡组快照
            pair_count: 最多使用的卡片数（每张卡一对牌）
            flip_back_delay: 配对失败后翻回的延迟（秒）
            rng: 随机数生成器（测试时可固定种子）

        Raises:
            NotEnoughCardsError: 不同的卡片少于2张
        """
        self.rng = rng or random.Random()
        self.flip_back_delay = flip_back_delay

        distinct = select_distinct_cards(collection)
        if len(distinct) < MIN_PAIRS:
            raise NotEnoughCardsError(len(distinct), MIN_PAIRS)

        chosen = self.rng.sample(distinct, min(max(pair_count, MIN_PAIRS), len(distinct)))
        self.tiles: List[GameTile] = self._build_tiles(chosen)

        self.phase = GamePhase.IDLE
        self.phase_history: List[GamePhase] = [GamePhase.IDLE]
        self.moves = 0
        self.matched_pairs = 0
        self.total_pairs = len(chosen)

        self._revealed: List[int] = []
        self._flip_back_handle: Optional[asyncio.TimerHandle] = None

    def _build_tiles(self, cards: List[SavedCard]) -> List[GameTile]:
        """每张卡生成两张牌并洗牌"""
        faces = []
        for card in cards:
            faces.append((card.id, TileKind.KANJI, card.kanji))
            faces.append((card.id, TileKind.MEANING, meaning_face(card)))

        self.rng.shuffle(faces)
        return [
            GameTile(tile_id=index, card_id=card_id, kind=kind, face=face)
            for index, (card_id, kind, face) in enumerate(faces)
        ]

    @property
    def tiles_by_id(self) -> Dict[int, GameTile]:
        return {tile.tile_id: tile for tile in self.tiles}

    @property
    def is_complete(self) -> bool:
        return self.phase == GamePhase.COMPLETE

    def _set_phase(self, phase: GamePhase):
        if phase != self.phase:
            self.phase = phase
            self.phase_history.append(phase)

    def start(self) -> GameSnapshot:
        """开始游戏"""
        if self.phase == GamePhase.IDLE:
            self._set_phase(GamePhase.AWAITING_FIRST_PICK)
            logger.info(f"🎮 记忆游戏开始: {self.total_pairs} 对")
        return self.snapshot()

    def pick(self, tile_id: int) -> GameSnapshot:
        """
        翻开一张牌

        已翻开、已配对、不存在的牌，以及游戏未开始或已结束时的点击都会被忽略。
        等待翻回期间再次点击时，先立即翻回上一对牌，再把这次点击当作第一张牌。

        Args:
            tile_id: 牌ID

        Returns:
            GameSnapshot: 游戏状态快照
        """
        if self.phase in (GamePhase.IDLE, GamePhase.COMPLETE):
            return self.snapshot()

        tile = self.tiles_by_id.get(tile_id)
        if tile is None or tile.state != TileState.HIDDEN:
            return self.snapshot()

        if self.phase == GamePhase.RESOLVING:
            self.resolve()

        tile.state = TileState.REVEALED
        self._revealed.append(tile_id)

        if self.phase == GamePhase.AWAITING_FIRST_PICK:
            self._set_phase(GamePhase.AWAITING_SECOND_PICK)
            return self.snapshot()

        self.moves += 1
        first, second = (self.tiles_by_id[i] for i in self._revealed)

        if first.card_id == second.card_id:
            first.state = TileState.MATCHED
            second.state = TileState.MATCHED
            self._revealed = []
            self.matched_pairs += 1

            if self.matched_pairs == self.total_pairs:
                self._set_phase(GamePhase.COMPLETE)
                logger.info(f"🎉 记忆游戏完成: {self.moves} 步")
            else:
                self._set_phase(GamePhase.AWAITING_FIRST_PICK)
        else:
            self._set_phase(GamePhase.RESOLVING)
            self._schedule_flip_back()

        return self.snapshot()

    def resolve(self) -> GameSnapshot:
        """把配对失败的两张牌翻回去"""
        self._cancel_flip_back()

        if self.phase != GamePhase.RESOLVING:
            return self.snapshot()

        for tile_id in self._revealed:
            self.tiles_by_id[tile_id].state = TileState.HIDDEN
        self._revealed = []
        self._set_phase(GamePhase.AWAITING_FIRST_PICK)
        return self.snapshot()

    def cancel(self):
        """放弃会话时取消定时器"""
        self._cancel_flip_back()

    def _schedule_flip_back(self):
        if self.flip_back_delay <= 0:
            self.resolve()
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # 没有事件循环时等待 resolve() 或下一次点击
            return

        self._flip_back_handle = loop.call_later(self.flip_back_delay, self.resolve)

    def _cancel_flip_back(self):
        if self._flip_back_handle is not None:
            self._flip_back_handle.cancel()
            self._flip_back_handle = None

    def snapshot(self) -> GameSnapshot:
        """游戏状态快照（未翻开的牌不显示内容）"""
        return GameSnapshot(
            phase=self.phase,
            tiles=[
                TileView(
                    tile_id=tile.tile_id,
                    kind=tile.kind,
                    state=tile.state,
                    face=tile.face if tile.state != TileState.HIDDEN else None,
                )
                for tile in self.tiles
            ],
            moves=self.moves,
            matched_pairs=self.matched_pairs,
            total_pairs=self.total_pairs,
        )
