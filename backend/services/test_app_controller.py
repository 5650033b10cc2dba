"""
应用控制器 - 单元测试
"""

import asyncio
import json
import random

import pytest

from conftest import FakeLookupClient, make_entry
from core.errors import ConnectivityError
from models.game_models import GamePhase
from models.vocab_models import DuplicatePolicy, SaveOutcome, ViewState
from services.app_controller import (
    CONNECTIVITY_MESSAGE,
    NOT_FOUND_MESSAGE,
    AppController,
)
from services.deck.collection_store import CollectionStore
from services.deck.local_storage import LocalStorage


def test_initial_state(controller):
    state = controller.state

    assert state.view == ViewState.SEARCH
    assert state.loading is False
    assert state.error is None
    assert state.current_card is None
    assert state.collection == ()
    assert state.current_card_saved is False


def test_hydrates_collection_on_start(lookup_client, storage, store):
    store.append(make_entry())
    store.save()

    controller = AppController(lookup_client, CollectionStore(storage))

    assert controller.state.collection_size == 1
    assert controller.state.collection[0].kanji == "猫"


@pytest.mark.asyncio
async def test_search_and_save_cat(controller, lookup_client, storage):
    """查询 cat 后收藏：卡组有一张猫卡片，且不含音频"""
    state = await controller.submit_search("  cat  ")

    assert lookup_client.calls == ["cat"]
    assert state.loading is False
    assert state.error is None
    assert state.current_card.kanji == "猫"
    assert state.current_card.sentences[0].audio is not None

    assert controller.save_current_card() == SaveOutcome.SAVED

    collection = controller.state.collection
    assert len(collection) == 1
    assert collection[0].kanji == "猫"
    assert collection[0].is_favorite is False
    assert all(s.audio is None for s in collection[0].sentences)
    assert collection[0].tenses.past.audio is None
    assert controller.state.current_card_saved is True

    stored = json.loads(storage.get_item("nihongo_deck"))
    assert len(stored) == 1
    assert "audio" not in json.dumps(stored)


@pytest.mark.asyncio
async def test_empty_query_is_noop(controller, lookup_client):
    before = controller.state

    state = await controller.submit_search("   ")

    assert lookup_client.calls == []
    assert state is before


@pytest.mark.asyncio
async def test_submit_uses_state_query(controller, lookup_client):
    controller.set_query("cat")

    state = await controller.submit_search()

    assert lookup_client.calls == ["cat"]
    assert state.current_card is not None


@pytest.mark.asyncio
async def test_connectivity_error(store):
    client = FakeLookupClient({"cat": ConnectivityError("timeout")})
    controller = AppController(client, store)

    state = await controller.submit_search("cat")

    assert state.error == CONNECTIVITY_MESSAGE
    assert state.current_card is None
    assert state.loading is False


@pytest.mark.asyncio
async def test_unexpected_error_reports_connectivity(store):
    client = FakeLookupClient({"cat": RuntimeError("boom")})
    controller = AppController(client, store)

    state = await controller.submit_search("cat")

    assert state.error == CONNECTIVITY_MESSAGE


@pytest.mark.asyncio
async def test_not_found(controller):
    state = await controller.submit_search("zzzz")

    assert state.error == NOT_FOUND_MESSAGE
    assert state.current_card is None


@pytest.mark.asyncio
async def test_new_search_clears_previous_result(controller):
    await controller.submit_search("cat")
    state = await controller.submit_search("zzzz")

    assert state.current_card is None
    assert state.error == NOT_FOUND_MESSAGE

    state = await controller.submit_search("cat")
    assert state.error is None
    assert state.current_card is not None


@pytest.mark.asyncio
async def test_loading_published_to_subscribers(controller):
    seen = []
    unsubscribe = controller.subscribe(lambda s: seen.append((s.loading, s.error, s.current_card)))

    await controller.submit_search("cat")
    unsubscribe()
    controller.navigate(ViewState.COLLECTION)

    assert seen[0] == (True, None, None)
    assert seen[-1][0] is False
    assert seen[-1][2] is not None
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_stale_result_is_discarded(store):
    """先发出的慢查询结果不能覆盖后发出的查询结果"""
    release_slow = asyncio.Event()

    class SlowClient:
        async def lookup(self, query):
            if query == "slow":
                await release_slow.wait()
                return make_entry("遅", ["slow"])
            return make_entry("速", ["fast"])

    controller = AppController(SlowClient(), store)

    slow_task = asyncio.ensure_future(controller.submit_search("slow"))
    await asyncio.sleep(0)
    await controller.submit_search("fast")
    release_slow.set()
    await slow_task

    assert controller.state.current_card.kanji == "速"
    assert controller.state.loading is False


@pytest.mark.asyncio
async def test_cancelled_search_clears_loading(store):
    started = asyncio.Event()

    class HangingClient:
        async def lookup(self, query):
            started.set()
            await asyncio.Event().wait()

    controller = AppController(HangingClient(), store)

    task = asyncio.ensure_future(controller.submit_search("cat"))
    await started.wait()
    assert controller.state.loading is True

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert controller.state.loading is False
    assert controller.state.current_card is None
    assert controller.state.error is None


@pytest.mark.asyncio
async def test_duplicate_save_allowed_by_default(controller):
    await controller.submit_search("cat")

    assert controller.is_current_saved() is False
    controller.save_current_card()
    assert controller.is_current_saved() is True
    assert controller.save_current_card() == SaveOutcome.SAVED

    assert controller.state.collection_size == 2


@pytest.mark.asyncio
async def test_duplicate_save_blocked(lookup_client, store):
    controller = AppController(lookup_client, store, duplicate_policy=DuplicatePolicy.BLOCK)
    await controller.submit_search("cat")

    assert controller.save_current_card() == SaveOutcome.SAVED
    assert controller.save_current_card() == SaveOutcome.DUPLICATE_BLOCKED
    assert controller.state.collection_size == 1


@pytest.mark.asyncio
async def test_duplicate_save_merged(store):
    client = FakeLookupClient({
        "cat": make_entry(),
        "neko": make_entry(english=["cat", "feline"]),
    })
    controller = AppController(client, store, duplicate_policy="merge")

    await controller.submit_search("cat")
    controller.save_current_card()
    original = controller.state.collection[0]
    controller.toggle_favorite(original.id)

    await controller.submit_search("neko")
    assert controller.save_current_card() == SaveOutcome.MERGED

    merged = controller.state.collection[0]
    assert controller.state.collection_size == 1
    assert merged.id == original.id
    assert merged.is_favorite is True
    assert merged.english == ["cat", "feline"]


def test_save_without_current_card(controller):
    assert controller.save_current_card() == SaveOutcome.NOTHING_TO_SAVE
    assert controller.state.collection == ()


@pytest.mark.asyncio
async def test_favorite_and_remove_persist(controller, storage):
    await controller.submit_search("cat")
    controller.save_current_card()
    card_id = controller.state.collection[0].id

    controller.set_favorite(card_id, True)
    assert json.loads(storage.get_item("nihongo_deck"))[0]["isFavorite"] is True

    controller.toggle_favorite(card_id)
    assert controller.state.collection[0].is_favorite is False

    controller.remove_card(card_id)
    assert controller.state.collection == ()
    assert json.loads(storage.get_item("nihongo_deck")) == []


@pytest.mark.asyncio
async def test_write_failure_keeps_session_state(tmp_path, lookup_client):
    storage = LocalStorage(tmp_path / "local_storage.json", quota_bytes=100)
    controller = AppController(lookup_client, CollectionStore(storage))

    await controller.submit_search("cat")
    assert controller.save_current_card() == SaveOutcome.SAVED

    assert controller.state.collection_size == 1
    assert storage.get_item("nihongo_deck") is None


def test_navigation(controller):
    assert controller.navigate(ViewState.COLLECTION).view == ViewState.COLLECTION
    assert controller.navigate("search").view == ViewState.SEARCH


def test_game_view_without_enough_cards(controller):
    state = controller.navigate(ViewState.GAME)

    assert state.view == ViewState.GAME
    assert controller.game is None


def test_game_view_starts_session_from_collection(store):
    store.append(make_entry("犬", ["dog"]))
    store.append(make_entry())
    store.save()
    controller = AppController(FakeLookupClient(), store, rng=random.Random(1))

    controller.navigate(ViewState.GAME)

    assert controller.game is not None
    assert controller.game.phase == GamePhase.AWAITING_FIRST_PICK
    assert controller.game.total_pairs == 2
