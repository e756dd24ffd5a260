"""Names widget business logic."""

import logging
from dataclasses import dataclass
from typing import Any

from feed_cache.config import NAMES_PER_REQUEST
from feed_cache.entities import NameEntity, PoolAcquisitionEntity
from feed_cache.services.name_generator import NameGenerator
from feed_cache.services.pool_cache_service import PoolCacheService
from feed_cache.services.recent_items_service import RecentItemsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamesResult:
    """Names served for one request, plus what was known when serving."""

    names: list[NameEntity]
    recent_names: list[str]
    acquisition: PoolAcquisitionEntity


class NamesService:
    """Serves names from a pre-generated pool, biased away from recent ones.

    Flow per request:
    1. Read the recent-names list
    2. Acquire ``NAMES_PER_REQUEST`` names from the pool (shortfall generated now)
    3. Record the served names in the recent list

    A background refill generates a full batch with the same recent list
    and records the generated names as recent as well.
    """

    def __init__(
        self,
        pool: PoolCacheService,
        recent: RecentItemsService,
        generator: NameGenerator,
    ) -> None:
        self._pool = pool
        self._recent = recent
        self._generator = generator

    async def get_names(self) -> NamesResult:
        """Get the names for one widget render."""
        recent_names = await self._recent.get()

        async def fetch(count: int) -> list[dict[str, Any]]:
            names = await self._generator.generate(count, recent_names)
            return [n.as_item() for n in names]

        async def after_refill(items: list[dict[str, Any]]) -> None:
            await self._recent.record([item["name"] for item in items], recent_names)

        acquisition = await self._pool.acquire(NAMES_PER_REQUEST, fetch=fetch, after_refill=after_refill)
        names = [NameEntity(name=item["name"], meaning=item.get("meaning", "")) for item in acquisition.items]

        await self._recent.record([n.name for n in names], recent_names)
        return NamesResult(names=names, recent_names=recent_names, acquisition=acquisition)

    async def cache_info(self) -> dict[str, Any] | None:
        """Pool description for debug payloads."""
        return await self._pool.pool_info()
