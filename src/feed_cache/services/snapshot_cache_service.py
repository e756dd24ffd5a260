"""Snapshot cache service: one computed aggregate with stale-while-revalidate.

Age bands, from ``now - snapshot.timestamp``:
- below ``fresh_ttl``: FRESH, served with no side effects
- below ``stale_ttl``: STALE, served while a background refresh runs
- otherwise, or missing: EXPIRED, recomputed before answering

A snapshot is stamped with the time its computation started.

If the synchronous recompute fails, whatever snapshot is still stored
(however old) is served as degraded output. Nothing marks a refresh as
in progress, so concurrent STALE requests may each start one; refreshes
are plain overwrites, so this only costs extra upstream calls.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from feed_cache.entities import Freshness, SnapshotEntity, SnapshotResultEntity
from feed_cache.protocols import KVStore
from feed_cache.services.background import BackgroundTaskRunner

logger = logging.getLogger(__name__)

Compute = Callable[[], Awaitable[dict[str, Any]]]


class SnapshotCacheService:
    """Single-snapshot cache with fresh, stale and expired bands.

    Example:
        ```python
        cache = SnapshotCacheService(
            store=store,
            key="sol-incinerator-data",
            runner=runner,
            fresh_ttl=300,
            stale_ttl=3600,
        )
        result = await cache.get(compute=fetch_metrics)
        ```
    """

    def __init__(
        self,
        store: KVStore,
        key: str,
        runner: BackgroundTaskRunner,
        fresh_ttl: float,
        stale_ttl: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the snapshot cache.

        Args:
            store: Shared key-value store
            key: Store key holding the snapshot
            runner: Owner of background refresh tasks
            fresh_ttl: Seconds a snapshot is served without refresh
            stale_ttl: Seconds a snapshot may be served at all (while refreshing)
            clock: Wall clock in seconds (injectable for tests)
        """
        if not 0 < fresh_ttl < stale_ttl:
            raise ValueError("fresh_ttl must be positive and below stale_ttl")

        self._store = store
        self._key = key
        self._runner = runner
        self._fresh_ttl = fresh_ttl
        self._stale_ttl = stale_ttl
        self._clock = clock

    async def _read(self) -> SnapshotEntity | None:
        raw = await self._store.get(self._key)
        if not raw or "data" not in raw:
            return None
        return SnapshotEntity(data=raw["data"], timestamp=float(raw.get("timestamp", 0.0)))

    async def _safe_read(self) -> SnapshotEntity | None:
        try:
            return await self._read()
        except Exception as e:
            logger.warning(f"Snapshot read error ({self._key}), treating as missing: {e!r}")
            return None

    async def _write(self, data: dict[str, Any], timestamp: float) -> None:
        await self._store.put(self._key, {"data": data, "timestamp": timestamp})

    def classify(self, snapshot: SnapshotEntity | None) -> Freshness:
        """Place a snapshot in its age band."""
        if snapshot is None:
            return Freshness.EXPIRED
        age = snapshot.age_seconds(self._clock())
        if age < self._fresh_ttl:
            return Freshness.FRESH
        if age < self._stale_ttl:
            return Freshness.STALE
        return Freshness.EXPIRED

    async def refresh(self, compute: Compute) -> dict[str, Any]:
        """Recompute and overwrite the snapshot.

        Returns:
            The newly computed data

        Raises:
            Exception: Whatever ``compute`` or the store write raises
        """
        started = self._clock()
        data = await compute()
        await self._write(data, started)
        logger.info(f"Snapshot {self._key} refreshed")
        return data

    def schedule_refresh(self, compute: Compute):
        """Start a background refresh without awaiting it.

        Returns:
            The background task handle
        """
        return self._runner.schedule(self.refresh(compute), name=f"refresh:{self._key}")

    async def get(self, compute: Compute) -> SnapshotResultEntity:
        """Serve the snapshot according to its age band.

        Args:
            compute: Coroutine function producing fresh data

        Returns:
            SnapshotResultEntity with the data served and how it was obtained

        Raises:
            Exception: What ``compute`` raised, when no snapshot exists to fall back on
        """
        snapshot = await self._safe_read()
        freshness = self.classify(snapshot)

        if snapshot is not None and freshness is Freshness.FRESH:
            age = snapshot.age_seconds(self._clock())
            logger.debug(f"SNAPSHOT HIT (fresh): {self._key} [age={age:.1f}s]")
            return SnapshotResultEntity(data=snapshot.data, freshness=freshness, age_seconds=age)

        if snapshot is not None and freshness is Freshness.STALE:
            age = snapshot.age_seconds(self._clock())
            logger.info(f"SNAPSHOT HIT (stale, refreshing): {self._key} [age={age:.1f}s]")
            self.schedule_refresh(compute)
            return SnapshotResultEntity(data=snapshot.data, freshness=freshness, age_seconds=age)

        logger.info(f"SNAPSHOT EXPIRED: {self._key}")
        started = self._clock()
        try:
            data = await compute()
        except Exception as e:
            fallback = await self._safe_read()
            if fallback is None:
                raise
            age = fallback.age_seconds(self._clock())
            logger.error(f"Using stale snapshot {self._key} due to error: {e} [age={age:.1f}s]")
            return SnapshotResultEntity(
                data=fallback.data,
                freshness=Freshness.EXPIRED,
                age_seconds=age,
                degraded=True,
            )

        try:
            await self._write(data, started)
        except Exception as e:
            logger.warning(f"Snapshot write error ({self._key}): {e!r}")

        return SnapshotResultEntity(data=data, freshness=Freshness.EXPIRED, age_seconds=self._clock() - started)
