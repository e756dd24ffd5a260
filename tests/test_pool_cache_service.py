"""
Tests for the pool cache service.
"""

import asyncio

import pytest

from feed_cache.entities import PoolSource
from feed_cache.services import PoolCacheService

KEY = "names_cache"


def items(start: int, count: int) -> list[dict]:
    return [{"name": f"item{i}"} for i in range(start, start + count)]


class RecordingFetch:
    """Fetch function that numbers items sequentially and records each call."""

    def __init__(self, gate: asyncio.Event | None = None):
        self.calls: list[int] = []
        self.gate = gate
        self.next_id = 1000

    async def __call__(self, count: int) -> list[dict]:
        self.calls.append(count)
        if self.gate is not None:
            await self.gate.wait()
        batch = items(self.next_id, count)
        self.next_id += count
        return batch


def make_pool(store, runner, clock=None, **kwargs) -> PoolCacheService:
    options = {"batch_size": 20, "low_water_mark": 8}
    options.update(kwargs)
    if clock is not None:
        options["clock"] = clock
    return PoolCacheService(store=store, key=KEY, runner=runner, **options)


async def seed(store, entries: list[dict], fetched_at: float = 1.0) -> None:
    await store.put(KEY, {"items": entries, "fetched_at": fetched_at})


@pytest.mark.asyncio
async def test_take_removes_from_front(store, runner):
    """Taken items come off the front and the rest stays in order."""
    pool = make_pool(store, runner)
    await seed(store, items(0, 10))

    result = await pool.take_from_pool(4)

    assert result.items == items(0, 4)
    assert result.remaining == 6
    stored = await store.get(KEY)
    assert stored["items"] == items(4, 6)


@pytest.mark.asyncio
async def test_take_last_items_deletes_key(store, runner):
    """Emptying the pool removes the entry."""
    pool = make_pool(store, runner)
    await seed(store, items(0, 4))

    result = await pool.take_from_pool(4)

    assert len(result.items) == 4
    assert result.remaining == 0
    assert KEY not in store


@pytest.mark.asyncio
async def test_take_insufficient_pool_leaves_store_unchanged(store, runner):
    """Asking for more than is pooled takes nothing."""
    pool = make_pool(store, runner)
    await seed(store, items(0, 3), fetched_at=5.0)

    result = await pool.take_from_pool(4)

    assert result.items == []
    assert result.remaining == 3
    assert await store.get(KEY) == {"items": items(0, 3), "fetched_at": 5.0}


@pytest.mark.asyncio
async def test_take_missing_pool(store, runner):
    pool = make_pool(store, runner)

    result = await pool.take_from_pool(4)

    assert result.items == []
    assert result.remaining == 0


@pytest.mark.asyncio
async def test_takes_shrink_monotonically(store, runner):
    """Successive takes without appends never grow the pool."""
    pool = make_pool(store, runner)
    await seed(store, items(0, 12))

    sizes = []
    for _ in range(4):
        sizes.append((await pool.take_from_pool(4)).remaining)

    assert sizes == [8, 4, 0, 0]


@pytest.mark.asyncio
async def test_acquire_below_mark_schedules_refill_without_waiting(store, runner):
    """Six pooled, mark of eight, four wanted: served from pool, refill in background."""
    pool = make_pool(store, runner)
    await seed(store, items(0, 6))
    fetch = RecordingFetch()

    acquisition = await pool.acquire(4, fetch=fetch)

    assert acquisition.items == items(0, 4)
    assert acquisition.remaining == 2
    assert acquisition.source is PoolSource.POOL
    assert acquisition.refill_scheduled is True
    # The refill task exists but has not run yet
    assert runner.pending == 1
    assert fetch.calls == []

    await runner.drain()

    assert fetch.calls == [20]
    assert await pool.size() == 22


@pytest.mark.asyncio
async def test_acquire_above_mark_does_not_refill(store, runner):
    pool = make_pool(store, runner)
    await seed(store, items(0, 16))
    fetch = RecordingFetch()

    acquisition = await pool.acquire(4, fetch=fetch)

    assert acquisition.remaining == 12
    assert acquisition.refill_scheduled is False
    assert runner.pending == 0


@pytest.mark.asyncio
async def test_acquire_shortfall_mode_fetches_exact_count(store, runner):
    """An empty pool is filled synchronously with only what is missing."""
    pool = make_pool(store, runner, fill_mode="shortfall")
    fetch = RecordingFetch()

    acquisition = await pool.acquire(4, fetch=fetch)

    assert len(acquisition.items) == 4
    assert acquisition.source is PoolSource.UPSTREAM
    assert fetch.calls == [4]

    await runner.drain()
    assert fetch.calls == [4, 20]
    assert await pool.size() == 20


@pytest.mark.asyncio
async def test_acquire_batch_mode_persists_surplus(store, runner):
    """Empty pool, batch of 20 fetched, 4 served: the other 16 are pooled."""
    pool = make_pool(store, runner, low_water_mark=0, fill_mode="batch")
    fetch = RecordingFetch()

    acquisition = await pool.acquire(4, fetch=fetch)

    assert acquisition.items == items(1000, 4)
    assert acquisition.source is PoolSource.UPSTREAM
    assert fetch.calls == [20]
    stored = await store.get(KEY)
    assert stored["items"] == items(1004, 16)
    assert runner.pending == 0


@pytest.mark.asyncio
async def test_acquire_short_upstream_returns_fewer(store, runner):
    """Only an upstream that comes back short yields fewer items."""
    pool = make_pool(store, runner, low_water_mark=0)

    async def short_fetch(count):
        return items(0, 2)

    acquisition = await pool.acquire(4, fetch=short_fetch)

    assert len(acquisition.items) == 2


@pytest.mark.asyncio
async def test_acquire_sync_fetch_error_propagates(store, runner):
    pool = make_pool(store, runner, low_water_mark=0)

    async def broken_fetch(count):
        raise RuntimeError("upstream down")

    with pytest.raises(RuntimeError, match="upstream down"):
        await pool.acquire(4, fetch=broken_fetch)


@pytest.mark.asyncio
async def test_refill_appends_to_current_state(store, runner):
    """A take that happens while a refill is fetching is not undone."""
    pool = make_pool(store, runner)
    await seed(store, items(0, 10))
    gate = asyncio.Event()
    fetch = RecordingFetch(gate=gate)

    pool.schedule_refill(fetch)
    await asyncio.sleep(0)  # let the refill start and block on the gate

    taken = await pool.take_from_pool(4)
    assert taken.remaining == 6

    gate.set()
    await runner.drain()

    stored = await store.get(KEY)
    assert stored["items"] == items(4, 6) + items(1000, 20)


@pytest.mark.asyncio
async def test_refill_calls_after_hook(store, runner):
    pool = make_pool(store, runner)
    seen = []

    async def after_refill(new_items):
        seen.extend(new_items)

    size = await pool.refill(RecordingFetch(), after_refill=after_refill)

    assert size == 20
    assert seen == items(1000, 20)


@pytest.mark.asyncio
async def test_append_respects_cap(store, runner):
    """Past the cap, the oldest items are kept."""
    pool = make_pool(store, runner, batch_size=5, max_pool_size=10)
    await seed(store, items(0, 8))

    size = await pool.append_to_pool(items(100, 5))

    assert size == 10
    stored = await store.get(KEY)
    assert stored["items"] == items(0, 8) + items(100, 2)


@pytest.mark.asyncio
async def test_append_sets_fetched_at(store, runner, clock):
    pool = make_pool(store, runner, clock=clock)
    await seed(store, items(0, 2), fetched_at=1.0)

    await pool.append_to_pool(items(10, 2))

    stored = await store.get(KEY)
    assert stored["fetched_at"] == clock.now


@pytest.mark.asyncio
async def test_store_errors_are_treated_as_miss(failing_store, runner):
    """An unreachable store still serves freshly fetched items."""
    pool = make_pool(failing_store, runner)
    fetch = RecordingFetch()

    acquisition = await pool.acquire(4, fetch=fetch)

    assert len(acquisition.items) == 4
    assert acquisition.source is PoolSource.UPSTREAM
    assert await pool.size() == 0
    assert await pool.pool_info() is None

    await runner.drain()
    assert runner.get_stats()["failed"] == 1


@pytest.mark.asyncio
async def test_pool_info(store, runner):
    pool = make_pool(store, runner)
    await seed(store, items(0, 3), fetched_at=0.0)

    info = await pool.pool_info()

    assert info == {"cached_count": 3, "fetched_at": "1970-01-01T00:00:00+00:00"}


def test_invalid_batch_size(store, runner):
    with pytest.raises(ValueError):
        make_pool(store, runner, batch_size=0)
