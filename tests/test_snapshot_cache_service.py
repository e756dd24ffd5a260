"""
Tests for the snapshot (stale-while-revalidate) cache service.
"""

import httpx
import pytest

from feed_cache.entities import Freshness
from feed_cache.services import SnapshotCacheService

KEY = "sol-incinerator-data"
FRESH_TTL = 300
STALE_TTL = 3600


class Compute:
    """Compute function returning numbered versions, or raising."""

    def __init__(self, error: Exception | None = None, clock=None, duration: float = 0.0):
        self.calls = 0
        self.error = error
        self.clock = clock
        self.duration = duration

    async def __call__(self) -> dict:
        self.calls += 1
        if self.clock is not None:
            self.clock.advance(self.duration)
        if self.error is not None:
            raise self.error
        return {"version": self.calls}


@pytest.fixture
def cache(store, runner, clock):
    return SnapshotCacheService(
        store=store,
        key=KEY,
        runner=runner,
        fresh_ttl=FRESH_TTL,
        stale_ttl=STALE_TTL,
        clock=clock,
    )


async def seed(store, data: dict, timestamp: float) -> None:
    await store.put(KEY, {"data": data, "timestamp": timestamp})


@pytest.mark.asyncio
async def test_missing_snapshot_is_computed_and_stored(cache, store, clock):
    compute = Compute()

    result = await cache.get(compute)

    assert result.data == {"version": 1}
    assert result.freshness is Freshness.EXPIRED
    assert result.age_seconds == 0.0
    assert result.degraded is False
    assert await store.get(KEY) == {"data": {"version": 1}, "timestamp": clock.now}


@pytest.mark.asyncio
async def test_fresh_snapshot_served_without_side_effects(cache, store, runner, clock):
    await seed(store, {"version": 0}, clock.now - 100)
    compute = Compute()

    result = await cache.get(compute)

    assert result.data == {"version": 0}
    assert result.freshness is Freshness.FRESH
    assert result.age_seconds == pytest.approx(100)
    assert compute.calls == 0
    assert runner.pending == 0


@pytest.mark.asyncio
async def test_stale_snapshot_served_then_refreshed(cache, store, runner, clock):
    """A stale read returns old data now and new data once the refresh lands."""
    await seed(store, {"version": 0}, clock.now - 1000)
    compute = Compute()

    result = await cache.get(compute)

    assert result.data == {"version": 0}
    assert result.freshness is Freshness.STALE
    assert runner.pending == 1

    await runner.drain()

    again = await cache.get(compute)
    assert again.data == {"version": 1}
    assert again.freshness is Freshness.FRESH
    assert compute.calls == 1


@pytest.mark.asyncio
async def test_expired_snapshot_recomputed(cache, store, clock):
    await seed(store, {"version": 0}, clock.now - STALE_TTL - 1)
    compute = Compute()

    result = await cache.get(compute)

    assert result.data == {"version": 1}
    assert result.freshness is Freshness.EXPIRED
    assert compute.calls == 1


@pytest.mark.asyncio
async def test_expired_snapshot_served_when_compute_fails(cache, store, clock):
    """Past the stale window with the network down, the old snapshot is still served."""
    await seed(store, {"version": 0}, clock.now - STALE_TTL - 1)
    compute = Compute(error=httpx.ConnectError("network down"))

    result = await cache.get(compute)

    assert result.data == {"version": 0}
    assert result.degraded is True
    assert result.age_seconds == pytest.approx(STALE_TTL + 1)


@pytest.mark.asyncio
async def test_compute_failure_without_snapshot_raises(cache):
    compute = Compute(error=RuntimeError("API errors: totalSol=500"))

    with pytest.raises(RuntimeError, match="totalSol=500"):
        await cache.get(compute)


@pytest.mark.asyncio
async def test_failed_background_refresh_keeps_old_snapshot(cache, store, runner, clock):
    await seed(store, {"version": 0}, clock.now - 1000)
    compute = Compute(error=RuntimeError("boom"))

    result = await cache.get(compute)
    await runner.drain()

    assert result.data == {"version": 0}
    assert (await store.get(KEY))["data"] == {"version": 0}
    assert runner.get_stats()["failed"] == 1


@pytest.mark.asyncio
async def test_band_boundaries(cache, store, clock):
    """Ages equal to a TTL fall into the older band."""
    await seed(store, {"version": 0}, clock.now - FRESH_TTL)
    assert cache.classify(await cache._read()) is Freshness.STALE

    await seed(store, {"version": 0}, clock.now - STALE_TTL)
    assert cache.classify(await cache._read()) is Freshness.EXPIRED

    assert cache.classify(None) is Freshness.EXPIRED


@pytest.mark.asyncio
async def test_unreachable_store_still_computes(failing_store, runner, clock):
    cache = SnapshotCacheService(
        store=failing_store,
        key=KEY,
        runner=runner,
        fresh_ttl=FRESH_TTL,
        stale_ttl=STALE_TTL,
        clock=clock,
    )

    result = await cache.get(Compute())

    assert result.data == {"version": 1}
    assert result.degraded is False


def test_invalid_ttls(store, runner):
    with pytest.raises(ValueError):
        SnapshotCacheService(store=store, key=KEY, runner=runner, fresh_ttl=3600, stale_ttl=300)


@pytest.mark.asyncio
async def test_snapshot_stamped_with_compute_start(cache, store, clock):
    """A slow recompute does not make its data look newer than it is."""
    started = clock.now
    compute = Compute(clock=clock, duration=45)

    result = await cache.get(compute)

    assert (await store.get(KEY))["timestamp"] == started
    assert result.age_seconds == pytest.approx(45)


@pytest.mark.asyncio
async def test_background_refresh_stamped_with_compute_start(cache, store, runner, clock):
    await seed(store, {"version": 0}, clock.now - 1000)
    started = clock.now

    await cache.get(Compute(clock=clock, duration=30))
    await runner.drain()

    assert await store.get(KEY) == {"data": {"version": 1}, "timestamp": started}
