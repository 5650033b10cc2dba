"""
卡组存储 - 单元测试
"""

import json
import logging

from conftest import make_entry
from services.deck.collection_store import CollectionStore
from services.deck.local_storage import LocalStorage


def test_load_empty_storage(store):
    assert store.load() == []


def test_append_prepends_and_sanitizes(store):
    store.append(make_entry("犬", ["dog"]))
    cards = store.append(make_entry(with_audio=True, with_tenses=True))

    assert [c.kanji for c in cards] == ["猫", "犬"]
    new_card = cards[0]
    assert new_card.is_favorite is False
    assert new_card.tags is None
    assert new_card.id and new_card.timestamp > 0
    assert all(s.audio is None for s in new_card.sentences)
    assert new_card.tenses.present.audio is None


def test_append_generates_unique_ids(store):
    store.append(make_entry())
    cards = store.append(make_entry())

    assert cards[0].id != cards[1].id


def test_save_load_round_trip(storage, store):
    store.append(make_entry("犬", ["dog"]))
    store.append(make_entry(with_tenses=True))
    store.set_favorite(store.cards[1].id, True)
    assert store.save(store.cards) is True

    reloaded = CollectionStore(storage).load()

    assert reloaded == store.cards


def test_round_trip_keeps_tags(storage, store):
    store.append(make_entry("犬", ["dog"]))
    store.append(make_entry())
    cards = [
        store.cards[0].model_copy(update={"tags": []}),
        store.cards[1].model_copy(update={"tags": ["animals"]}),
    ]
    assert store.save(cards) is True

    reloaded = CollectionStore(storage).load()

    assert reloaded == cards
    assert reloaded[0].tags == []
    assert reloaded[1].tags == ["animals"]


def test_saved_json_has_no_audio(storage, store):
    store.append(make_entry(with_audio=True, with_tenses=True))
    store.save()

    raw = storage.get_item("nihongo_deck")
    assert "audio" not in raw
    data = json.loads(raw)
    assert data[0]["isFavorite"] is False
    assert "tags" not in data[0]


def test_set_favorite_only_changes_target(store):
    store.append(make_entry("犬", ["dog"]))
    store.append(make_entry("鳥", ["bird"]))
    before = store.cards
    target = before[1]

    after = store.set_favorite(target.id, True)

    assert after[1].is_favorite is True
    assert after[1].id == target.id
    assert after[1].timestamp == target.timestamp
    assert after[1].kanji == target.kanji
    assert after[0] == before[0]


def test_set_favorite_unknown_id_is_noop(store):
    store.append(make_entry())
    before = store.cards

    assert store.set_favorite("missing", True) == before


def test_toggle_favorite(store):
    card = store.append(make_entry())[0]

    assert store.toggle_favorite(card.id)[0].is_favorite is True
    assert store.toggle_favorite(card.id)[0].is_favorite is False


def test_remove_card(store):
    store.append(make_entry("犬", ["dog"]))
    cards = store.append(make_entry())

    remaining = store.remove(cards[0].id)

    assert [c.kanji for c in remaining] == ["犬"]
    assert store.remove("missing") == remaining


def test_merge_keeps_identity_and_position(store):
    store.append(make_entry())
    store.append(make_entry("犬", ["dog"]))
    old = store.cards[1]
    store.set_favorite(old.id, True)

    refreshed = make_entry(english=["cat", "feline"])
    cards = store.merge(old.id, refreshed)

    assert cards[1].id == old.id
    assert cards[1].timestamp == old.timestamp
    assert cards[1].is_favorite is True
    assert cards[1].english == ["cat", "feline"]


def test_find_duplicate(store):
    store.append(make_entry())

    assert store.find_duplicate(make_entry(with_audio=True)) is not None
    assert store.find_duplicate(make_entry(english=["kitty"])) is None
    assert store.find_duplicate(make_entry("犬")) is None


def test_load_corrupt_json_returns_empty(storage, caplog):
    storage.set_item("nihongo_deck", "{not json")

    with caplog.at_level(logging.ERROR):
        cards = CollectionStore(storage).load()

    assert cards == []
    assert "解析卡组数据失败" in caplog.text


def test_load_invalid_schema_returns_empty(storage):
    storage.set_item("nihongo_deck", json.dumps([{"kanji": "猫"}]))

    assert CollectionStore(storage).load() == []


def test_load_corrupt_storage_file_returns_empty(tmp_path):
    path = tmp_path / "local_storage.json"
    path.write_text("garbage", encoding="utf-8")

    assert CollectionStore(LocalStorage(path)).load() == []


def test_load_strips_legacy_audio(storage):
    legacy = make_entry(with_audio=True).model_dump(exclude_none=True)
    legacy.update({"id": "1", "timestamp": 1, "isFavorite": True, "tags": []})
    storage.set_item("nihongo_deck", json.dumps([legacy]))

    cards = CollectionStore(storage).load()

    assert len(cards) == 1
    assert cards[0].is_favorite is True
    assert all(s.audio is None for s in cards[0].sentences)


def test_save_failure_keeps_memory(tmp_path, caplog):
    storage = LocalStorage(tmp_path / "local_storage.json", quota_bytes=200)
    store = CollectionStore(storage)
    cards = store.append(make_entry(with_tenses=True))

    with caplog.at_level(logging.ERROR):
        assert store.save(cards) is False

    assert store.cards == cards
    assert storage.get_item("nihongo_deck") is None
    assert "保存卡组失败" in caplog.text
