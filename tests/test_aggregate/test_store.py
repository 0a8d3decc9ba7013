"""Tests for the daily aggregate store."""

import asyncio

import pytest

from usage_tracker.aggregate.models import DailyRecord, LastActive, RecordDelta
from usage_tracker.aggregate.store import DailyAggregateStore, day_key
from usage_tracker.exceptions import StorageReadError
from usage_tracker.storage.memory import MemoryKeyValueStore


def test_day_key():
    from datetime import date

    assert day_key(date(2024, 3, 9)) == "2024-03-09"
    assert day_key("2024-03-09") == "2024-03-09"


def test_get_or_init_persists_default(clock):
    backend = MemoryKeyValueStore()
    store = DailyAggregateStore(backend, clock=clock)
    record = asyncio.run(store.get_or_init_today())
    assert record == DailyRecord(date="2024-03-10")
    assert backend.snapshot()["2024-03-10"]["totalTime"] == 0
    assert store.current_key == "2024-03-10"


def test_get_or_init_reads_existing(clock):
    backend = MemoryKeyValueStore(initial={"2024-03-10": {"tabsOpened": 4}})
    store = DailyAggregateStore(backend, clock=clock)
    record = asyncio.run(store.get_or_init_today())
    assert record.tabs_opened == 4


def test_merge_accumulates(clock):
    backend = MemoryKeyValueStore()
    store = DailyAggregateStore(backend, clock=clock)

    async def scenario():
        await store.merge_update(RecordDelta(total_time=10, ai_time=10, usage_by_site={"Claude": 10}))
        await store.merge_update(RecordDelta(total_time=5, ai_time=5, usage_by_site={"Bard": 5}))
        await store.merge_update(RecordDelta(last_active=LastActive("Bard", 7)))
        return await store.get_or_init_today()

    record = asyncio.run(scenario())
    assert record.total_time == 15
    assert record.ai_time == 15
    assert record.usage_by_site == {"Claude": 10, "Bard": 5}
    assert record.last_active == LastActive("Bard", 7)


def test_merge_rereads_backend(clock):
    backend = MemoryKeyValueStore()
    store = DailyAggregateStore(backend, clock=clock)

    async def scenario():
        await store.merge_update(RecordDelta(tabs_opened=1))
        # another writer updates the record behind the store's back
        raw = await backend.get("2024-03-10")
        raw["tabsOpened"] = 10
        await backend.set("2024-03-10", raw)
        return await store.merge_update(RecordDelta(tabs_opened=1))

    assert asyncio.run(scenario()).tabs_opened == 11


def test_concurrent_merges_do_not_lose_updates(clock):
    backend = MemoryKeyValueStore()
    store = DailyAggregateStore(backend, clock=clock)

    async def scenario():
        await asyncio.gather(
            *(store.merge_update(RecordDelta(tabs_opened=1)) for _ in range(25))
        )
        return await store.get_or_init_today()

    assert asyncio.run(scenario()).tabs_opened == 25


def test_empty_delta_does_not_write(clock):
    backend = MemoryKeyValueStore()
    store = DailyAggregateStore(backend, clock=clock)

    async def scenario():
        await store.get_or_init_today()
        await backend.set("2024-03-10", {"date": "2024-03-10", "marker": True})
        await store.merge_update(RecordDelta())

    asyncio.run(scenario())
    assert backend.snapshot()["2024-03-10"] == {"date": "2024-03-10", "marker": True}


def test_rollover_seals_previous_day(clock):
    backend = MemoryKeyValueStore()
    store = DailyAggregateStore(backend, clock=clock)

    async def scenario():
        await store.merge_update(RecordDelta(total_time=100))
        clock.next_day()
        key = await store.seal_and_rollover()
        await store.merge_update(RecordDelta(total_time=7))
        return key

    key = asyncio.run(scenario())
    assert key == "2024-03-11"
    assert store.sealed_keys == {"2024-03-10"}
    data = backend.snapshot()
    assert data["2024-03-10"]["totalTime"] == 100
    assert data["2024-03-11"]["totalTime"] == 7


def test_rollover_before_midnight_is_noop(clock):
    store = DailyAggregateStore(MemoryKeyValueStore(), clock=clock)

    async def scenario():
        await store.get_or_init_today()
        return await store.seal_and_rollover()

    assert asyncio.run(scenario()) == "2024-03-10"
    assert store.sealed_keys == frozenset()


def test_implicit_rollover_on_date_change(clock):
    backend = MemoryKeyValueStore()
    store = DailyAggregateStore(backend, clock=clock)

    async def scenario():
        await store.merge_update(RecordDelta(tabs_closed=1))
        clock.next_day()
        await store.merge_update(RecordDelta(tabs_closed=1))

    asyncio.run(scenario())
    assert store.current_key == "2024-03-11"
    assert "2024-03-10" in store.sealed_keys
    assert backend.snapshot()["2024-03-10"]["tabsClosed"] == 1
    assert backend.snapshot()["2024-03-11"]["tabsClosed"] == 1


def test_clock_moving_back_keeps_current_key(clock):
    from datetime import timedelta

    backend = MemoryKeyValueStore()
    store = DailyAggregateStore(backend, clock=clock)

    async def scenario():
        clock.next_day()
        await store.merge_update(RecordDelta(total_time=1))
        clock.day -= timedelta(days=1)
        await store.merge_update(RecordDelta(total_time=1))

    asyncio.run(scenario())
    assert "2024-03-10" not in backend.snapshot()
    assert backend.snapshot()["2024-03-11"]["totalTime"] == 2


def test_get_record_and_list_days(clock):
    backend = MemoryKeyValueStore(initial={"2024-03-01": {"totalTime": 9}})
    store = DailyAggregateStore(backend, clock=clock)

    async def scenario():
        await store.get_or_init_today()
        past = await store.get_record("2024-03-01")
        missing = await store.get_record("2024-02-01")
        days = await store.list_days()
        return past, missing, days

    past, missing, days = asyncio.run(scenario())
    assert past.total_time == 9
    assert past.date == "2024-03-01"
    assert missing is None
    assert days == ["2024-03-01", "2024-03-10"]


@pytest.mark.parametrize(
    "raw",
    [
        {"totalTime": "abc"},
        {"usageBySite": "Claude"},
        {"lastActive": "Claude"},
        ["not", "a", "record"],
    ],
)
def test_malformed_record_raises_storage_error(clock, raw):
    store = DailyAggregateStore(MemoryKeyValueStore(initial={"2024-03-10": raw}), clock=clock)
    with pytest.raises(StorageReadError, match="Malformed record stored under 2024-03-10"):
        asyncio.run(store.merge_update(RecordDelta(tabs_opened=1)))
