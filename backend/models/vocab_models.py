# -*- coding: utf-8 -*-
"""
词汇卡片数据模型 - Alba NihonGo
查询结果、可持久化条目、收藏卡片
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExampleSentence(BaseModel):
    """例句模型（audio 仅用于展示，不持久化）"""
    model_config = ConfigDict(frozen=True)

    japanese: str
    english: str
    romaji: str
    audio: Optional[str] = None  # Base64编码的音频


class VerbTenses(BaseModel):
    """动词时态例句"""
    model_config = ConfigDict(frozen=True)

    present: ExampleSentence
    past: ExampleSentence
    future: ExampleSentence


class VocabularyData(BaseModel):
    """单词查询结果模型"""
    model_config = ConfigDict(frozen=True)

    kanji: str
    kana: str  # 平假名或片假名
    romaji: str
    english: List[str] = Field(default_factory=list)
    sentences: List[ExampleSentence] = Field(default_factory=list)
    tenses: Optional[VerbTenses] = None


class PersistableEntry(VocabularyData):
    """已去除音频的条目，可以写入存储"""


class SavedCard(PersistableEntry):
    """收藏卡片模型"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: int  # 毫秒时间戳
    is_favorite: bool = Field(False, alias="isFavorite")
    tags: Optional[List[str]] = None  # 已废弃

    def to_storage(self) -> dict:
        """转换为存储格式（驼峰字段名，省略空字段）"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ViewState(str, Enum):
    """界面视图"""
    SEARCH = "search"
    COLLECTION = "collection"
    GAME = "game"


class DuplicatePolicy(str, Enum):
    """重复收藏策略"""
    ALLOW = "allow"
    BLOCK = "block"
    MERGE = "merge"


class SaveOutcome(str, Enum):
    """收藏操作结果"""
    SAVED = "saved"
    MERGED = "merged"
    DUPLICATE_BLOCKED = "duplicate_blocked"
    NOTHING_TO_SAVE = "nothing_to_save"


def first_sense(entry: VocabularyData) -> Optional[str]:
    """返回第一个英文释义，没有则返回 None"""
    return entry.english[0] if entry.english else None


def same_headword(a: VocabularyData, b: VocabularyData) -> bool:
    """
    判断两个条目是否视为同一个单词

    比较汉字和第一个英文释义，不比较id
    """
    return a.kanji == b.kanji and first_sense(a) == first_sense(b)
