"""
测试公共夹具
"""

import random
from typing import List, Optional

import pytest

from models.vocab_models import ExampleSentence, VerbTenses, VocabularyData
from services.app_controller import AppController
from services.deck.collection_store import CollectionStore
from services.deck.local_storage import LocalStorage


def make_sentence(japanese: str = "猫がいます。", audio: Optional[str] = None) -> ExampleSentence:
    return ExampleSentence(
        japanese=japanese,
        english="There is a cat.",
        romaji="Neko ga imasu.",
        audio=audio,
    )


def make_entry(
    kanji: str = "猫",
    english: Optional[List[str]] = None,
    with_audio: bool = False,
    with_tenses: bool = False,
) -> VocabularyData:
    """构造测试用单词条目"""
    audio = "UklGRiQAAABXQVZF" if with_audio else None
    tenses = None
    if with_tenses:
        tenses = VerbTenses(
            present=make_sentence("食べます。", audio),
            past=make_sentence("食べました。", audio),
            future=make_sentence("食べるでしょう。", audio),
        )
    return VocabularyData(
        kanji=kanji,
        kana="ねこ",
        romaji="neko",
        english=english if english is not None else ["cat"],
        sentences=[make_sentence(audio=audio), make_sentence("猫が好きです。", audio)],
        tenses=tenses,
    )


class FakeLookupClient:
    """可编程的词典查询客户端"""

    def __init__(self, results=None):
        self.results = dict(results or {})
        self.calls: List[str] = []

    async def lookup(self, query: str):
        self.calls.append(query)
        result = self.results.get(query)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "local_storage.json")


@pytest.fixture
def store(storage):
    return CollectionStore(storage)


@pytest.fixture
def lookup_client():
    return FakeLookupClient({"cat": make_entry(with_audio=True, with_tenses=True)})


@pytest.fixture
def controller(lookup_client, store):
    return AppController(lookup_client, store, rng=random.Random(7))
