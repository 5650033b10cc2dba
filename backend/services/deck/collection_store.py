# -*- coding: utf-8 -*-
"""
卡组存储服务 - Alba NihonGo
管理用户收藏的卡片：加载、保存、添加、收藏标记、删除
"""

import json
import logging
import time
import uuid
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from core.errors import StorageParseError, StorageWriteError
from models.vocab_models import SavedCard, VocabularyData, same_headword
from services.deck.card_sanitizer import sanitize_card, sanitize_entry
from services.deck.local_storage import LocalStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "nihongo_deck"

_collection_adapter = TypeAdapter(List[SavedCard])


def _now_ms() -> int:
    return int(time.time() * 1000)


class CollectionStore:
    """
    卡组存储

    内存中保存当前卡组快照（新卡在最前面）。
    修改操作只更新内存快照，由调用方随后调用 save() 写入存储。
    """

    def __init__(self, storage: LocalStorage, key: str = DEFAULT_STORAGE_KEY):
        """
        初始化卡组存储

        Args:
            storage: 本地键值存储
            key: 卡组在存储中的键名
        """
        self.storage = storage
        self.key = key
        self._cards: List[SavedCard] = []

    @property
    def cards(self) -> List[SavedCard]:
        """当前卡组（副本）"""
        return list(self._cards)

    def load(self) -> List[SavedCard]:
        """
        从存储加载卡组

        数据损坏时返回空卡组并记录日志，不抛出异常

        Returns:
            List[SavedCard]: 卡组
        """
        try:
            raw = self.storage.get_item(self.key)
            if raw is None:
                self._cards = []
                return self.cards

            cards = _collection_adapter.validate_python(json.loads(raw))
            # 旧数据可能带有音频
            self._cards = [sanitize_card(card) for card in cards]
            logger.info(f"✅ 加载卡组: {len(self._cards)} 张卡片")

        except (StorageParseError, ValueError, ValidationError) as e:
            logger.error(f"❌ 解析卡组数据失败: {e}")
            self._cards = []

        return self.cards

    def save(self, collection: Optional[Sequence[SavedCard]] = None) -> bool:
        """
        将完整卡组写入存储（覆盖旧值）

        Args:
            collection: 要保存的卡组，默认为当前内存快照

        Returns:
            bool: 是否写入成功，失败时内存中的卡组保持不变
        """
        if collection is None:
            collection = self._cards

        payload = json.dumps([card.to_storage() for card in collection], ensure_ascii=False)

        try:
            self.storage.set_item(self.key, payload)
            return True
        except StorageWriteError as e:
            logger.error(f"❌ 保存卡组失败: {e}")
            return False

    def append(self, entry: VocabularyData) -> List[SavedCard]:
        """
        添加新卡片到卡组最前面

        Args:
            entry: 单词条目（会先清理音频）

        Returns:
            List[SavedCard]: 新的卡组
        """
        card = SavedCard(
            **sanitize_entry(entry).model_dump(),
            id=uuid.uuid4().hex,
            timestamp=_now_ms(),
            is_favorite=False,
        )
        self._cards = [card] + self._cards
        logger.info(f"✅ 收藏卡片: {card.kanji} ({card.id})")
        return self.cards

    def set_favorite(self, card_id: str, value: bool) -> List[SavedCard]:
        """
        设置收藏标记

        找不到卡片时卡组不变

        Args:
            card_id: 卡片ID
            value: 是否标记为喜欢
        """
        self._cards = [
            card.model_copy(update={"is_favorite": value}) if card.id == card_id else card
            for card in self._cards
        ]
        return self.cards

    def toggle_favorite(self, card_id: str) -> List[SavedCard]:
        """切换收藏标记"""
        card = self.get(card_id)
        if card is None:
            return self.cards
        return self.set_favorite(card_id, not card.is_favorite)

    def remove(self, card_id: str) -> List[SavedCard]:
        """删除卡片，找不到时卡组不变"""
        self._cards = [card for card in self._cards if card.id != card_id]
        return self.cards

    def merge(self, card_id: str, entry: VocabularyData) -> List[SavedCard]:
        """
        用新条目内容替换已有卡片

        保留 id / timestamp / isFavorite / tags 以及卡片位置
        """
        clean = sanitize_entry(entry).model_dump()
        self._cards = [
            SavedCard(
                **clean,
                id=card.id,
                timestamp=card.timestamp,
                is_favorite=card.is_favorite,
                tags=card.tags,
            )
            if card.id == card_id else card
            for card in self._cards
        ]
        return self.cards

    def get(self, card_id: str) -> Optional[SavedCard]:
        """按ID查找卡片"""
        for card in self._cards:
            if card.id == card_id:
                return card
        return None

    def find_duplicate(self, entry: VocabularyData) -> Optional[SavedCard]:
        """查找汉字和第一个释义都相同的已收藏卡片"""
        for card in self._cards:
            if same_headword(card, entry):
                return card
        return None
