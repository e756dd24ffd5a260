"""Pool cache service: a FIFO stock of pre-fetched items.

Each request takes a few items from the front of a stored pool. When
the pool runs low, a larger batch is fetched in the background and
appended, so most requests never wait on the upstream API.

The store offers no locks or transactions. Every mutation is a
read-modify-write done as late as possible, and concurrent writers are
resolved by last-writer-wins. The worst outcome of a race is a few
duplicate or lost pooled items, never a corrupt entry.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, Literal

from feed_cache.entities import PoolAcquisitionEntity, PoolEntryEntity, PoolSource, TakeResultEntity
from feed_cache.protocols import KVStore
from feed_cache.services.background import BackgroundTaskRunner

logger = logging.getLogger(__name__)

Item = dict[str, Any]
FetchItems = Callable[[int], Awaitable[list[Item]]]
AfterRefill = Callable[[list[Item]], Awaitable[None]]


class PoolCacheService:
    """Read-through pool cache with low-water-mark refill.

    Policy:
    - ``take_from_pool(n)`` removes n items from the front, or nothing
      if fewer than n are stored
    - after each take in ``acquire``, a remainder below
      ``low_water_mark`` schedules one background refill of
      ``batch_size`` items, appended to whatever is stored by then
    - a shortfall is filled synchronously, either with exactly the
      missing count (``fill_mode="shortfall"``) or with a full batch whose
      surplus is appended to the pool (``fill_mode="batch"``)
    - store errors are logged and treated as an empty pool

    Example:
        ```python
        pool = PoolCacheService(
            store=store,
            key="names_cache",
            runner=runner,
            batch_size=20,
            low_water_mark=8,
        )
        acquisition = await pool.acquire(4, fetch=generate_names)
        ```
    """

    def __init__(
        self,
        store: KVStore,
        key: str,
        runner: BackgroundTaskRunner,
        batch_size: int,
        low_water_mark: int = 0,
        max_pool_size: int | None = None,
        fill_mode: Literal["shortfall", "batch"] = "shortfall",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the pool cache.

        Args:
            store: Shared key-value store
            key: Store key holding the pool entry
            runner: Owner of background refill tasks
            batch_size: Items fetched per refill (and per batch-mode fill)
            low_water_mark: Refill when fewer items remain; 0 disables refills
            max_pool_size: Cap applied when appending; None for unbounded
            fill_mode: How a synchronous shortfall is fetched
            clock: Wall clock for ``fetched_at`` (injectable for tests)
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if max_pool_size is not None and max_pool_size < 1:
            raise ValueError("max_pool_size must be positive or None")

        self._store = store
        self._key = key
        self._runner = runner
        self._batch_size = batch_size
        self._low_water_mark = low_water_mark
        self._max_pool_size = max_pool_size
        self._fill_mode = fill_mode
        self._clock = clock

    async def _read(self) -> PoolEntryEntity | None:
        raw = await self._store.get(self._key)
        if not raw or not raw.get("items"):
            return None
        return PoolEntryEntity(items=list(raw["items"]), fetched_at=float(raw.get("fetched_at", 0.0)))

    async def _write(self, entry: PoolEntryEntity) -> None:
        if entry.items:
            await self._store.put(self._key, {"items": entry.items, "fetched_at": entry.fetched_at})
        else:
            await self._store.delete(self._key)

    async def take_from_pool(self, count: int) -> TakeResultEntity:
        """Remove ``count`` items from the front of the stored pool.

        Args:
            count: Number of items wanted

        Returns:
            TakeResultEntity with the taken items and the pool size after
            the take. When the pool holds fewer than ``count`` items,
            nothing is taken and ``remaining`` is the untouched size.
        """
        try:
            entry = await self._read()
            if entry is None:
                return TakeResultEntity(items=[], remaining=0)

            if len(entry.items) < count:
                return TakeResultEntity(items=[], remaining=len(entry.items))

            taken, rest = entry.items[:count], entry.items[count:]
            await self._write(PoolEntryEntity(items=rest, fetched_at=entry.fetched_at))
            return TakeResultEntity(items=taken, remaining=len(rest))
        except Exception as e:
            logger.warning(f"Pool read error ({self._key}), treating as empty: {e!r}")
            return TakeResultEntity(items=[], remaining=0)

    async def append_to_pool(self, items: list[Item]) -> int:
        """Append items to whatever is stored right now.

        The current entry is re-read immediately before the write so that
        takes which happened since the items were fetched are kept.

        Args:
            items: Items to append at the back

        Returns:
            The stored pool size after the append
        """
        if not items:
            return await self.size()

        current = await self._read()
        merged = (current.items if current else []) + list(items)
        if self._max_pool_size is not None and len(merged) > self._max_pool_size:
            logger.info(
                f"Pool {self._key} capped at {self._max_pool_size} "
                f"(dropped {len(merged) - self._max_pool_size} new items)"
            )
            merged = merged[: self._max_pool_size]

        await self._write(PoolEntryEntity(items=merged, fetched_at=self._clock()))
        return len(merged)

    async def refill(self, fetch: FetchItems, after_refill: AfterRefill | None = None) -> int:
        """Fetch one batch and append it to the pool.

        Args:
            fetch: Coroutine function returning up to n new items
            after_refill: Optional hook awaited with the fetched items

        Returns:
            The stored pool size after the append (unchanged if the fetch
            produced nothing)
        """
        logger.info(f"Refilling pool {self._key} with {self._batch_size} new items...")
        items = await fetch(self._batch_size)
        if not items:
            logger.warning(f"Refill of pool {self._key} produced no items")
            return await self.size()

        size = await self.append_to_pool(items)
        logger.info(f"Pool {self._key} refilled: now has {size} items")

        if after_refill is not None:
            await after_refill(items)
        return size

    def schedule_refill(self, fetch: FetchItems, after_refill: AfterRefill | None = None):
        """Start a background refill without awaiting it.

        Returns:
            The background task handle
        """
        return self._runner.schedule(
            self.refill(fetch, after_refill),
            name=f"refill:{self._key}",
        )

    async def acquire(
        self,
        count: int,
        fetch: FetchItems,
        after_refill: AfterRefill | None = None,
    ) -> PoolAcquisitionEntity:
        """Get ``count`` items, from the pool when possible.

        Business logic:
        1. Take ``count`` items from the pool
        2. Schedule a background refill if the remainder is below the mark
        3. Fill any shortfall with a synchronous upstream fetch

        Args:
            count: Number of items the caller needs now
            fetch: Coroutine function returning up to n new items
            after_refill: Optional hook for the background refill

        Returns:
            PoolAcquisitionEntity holding at most ``count`` items; fewer only
            if the upstream fetch itself came back short

        Raises:
            Exception: Whatever ``fetch`` raises on the synchronous path
        """
        result = await self.take_from_pool(count)

        refill_scheduled = False
        if self._low_water_mark > 0 and result.remaining < self._low_water_mark:
            logger.info(f"Pool {self._key} low ({result.remaining} remaining), triggering background refill")
            self.schedule_refill(fetch, after_refill)
            refill_scheduled = True

        shortfall = count - len(result.items)
        if shortfall <= 0:
            logger.info(f"Serving {count} items from pool {self._key} ({result.remaining} remaining)")
            return PoolAcquisitionEntity(
                items=result.items,
                remaining=result.remaining,
                source=PoolSource.POOL,
                refill_scheduled=refill_scheduled,
            )

        logger.info(f"Pool {self._key} short by {shortfall}, fetching synchronously...")
        if self._fill_mode == "batch":
            fetched = await fetch(max(self._batch_size, shortfall))
            served, surplus = fetched[:shortfall], fetched[shortfall:]
            if surplus:
                try:
                    await self.append_to_pool(surplus)
                    logger.info(f"Cached {len(surplus)} items in pool {self._key} for future requests")
                except Exception as e:
                    logger.warning(f"Failed to cache surplus items in pool {self._key}: {e!r}")
        else:
            served = (await fetch(shortfall))[:shortfall]

        return PoolAcquisitionEntity(
            items=result.items + served,
            remaining=result.remaining,
            source=PoolSource.UPSTREAM,
            refill_scheduled=refill_scheduled,
        )

    async def size(self) -> int:
        """Current stored pool size (0 on store errors)."""
        try:
            entry = await self._read()
        except Exception as e:
            logger.warning(f"Pool read error ({self._key}): {e!r}")
            return 0
        return len(entry.items) if entry else 0

    async def pool_info(self) -> dict[str, Any] | None:
        """Describe the stored pool for debug payloads.

        Returns:
            ``{"cached_count", "fetched_at"}`` or None if absent or unreadable
        """
        try:
            entry = await self._read()
        except Exception as e:
            logger.warning(f"Cache info error ({self._key}): {e!r}")
            return None
        if entry is None:
            return None
        return {
            "cached_count": len(entry.items),
            "fetched_at": datetime.fromtimestamp(entry.fetched_at, tz=timezone.utc).isoformat(),
        }
