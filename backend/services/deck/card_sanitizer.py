# -*- coding: utf-8 -*-
"""
卡片清理 - Alba NihonGo
保存前去除例句中的音频数据（Base64音频体积大，会撑爆本地存储配额）
"""

from typing import Optional

from models.vocab_models import (
    ExampleSentence,
    PersistableEntry,
    SavedCard,
    VerbTenses,
    VocabularyData,
)


def _strip_sentence(sentence: ExampleSentence) -> ExampleSentence:
    """复制例句并去掉音频"""
    return ExampleSentence(
        japanese=sentence.japanese,
        english=sentence.english,
        romaji=sentence.romaji,
    )


def _strip_tenses(tenses: Optional[VerbTenses]) -> Optional[VerbTenses]:
    if tenses is None:
        return None
    return VerbTenses(
        present=_strip_sentence(tenses.present),
        past=_strip_sentence(tenses.past),
        future=_strip_sentence(tenses.future),
    )


def sanitize_entry(entry: VocabularyData) -> PersistableEntry:
    """
    生成可持久化的条目副本

    处理 sentences 中的每个例句以及三个时态例句，原对象不变。
    对已经清理过的条目再次调用结果相同。

    Args:
        entry: 查询得到的单词条目

    Returns:
        PersistableEntry: 不含任何音频的深拷贝
    """
    return PersistableEntry(
        kanji=entry.kanji,
        kana=entry.kana,
        romaji=entry.romaji,
        english=list(entry.english),
        sentences=[_strip_sentence(s) for s in entry.sentences],
        tenses=_strip_tenses(entry.tenses),
    )


def sanitize_card(card: SavedCard) -> SavedCard:
    """清理已收藏的卡片，保留 id / timestamp / isFavorite / tags"""
    clean = sanitize_entry(card)
    return SavedCard(
        **clean.model_dump(),
        id=card.id,
        timestamp=card.timestamp,
        is_favorite=card.is_favorite,
        tags=card.tags,
    )
