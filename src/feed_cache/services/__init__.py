"""Service layer for business logic.

This layer contains the caching core and the widget orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from feed_cache.services import BackgroundTaskRunner, PoolCacheService

    runner = BackgroundTaskRunner()
    pool = PoolCacheService(store=store, key="names_cache", runner=runner, batch_size=20)
    acquisition = await pool.acquire(4, fetch=generate)
    ```
"""

from .background import BackgroundTaskRunner
from .incinerator_service import IncineratorService
from .name_generator import NameGenerator
from .names_service import NamesResult, NamesService
from .pool_cache_service import PoolCacheService
from .recent_items_service import RecentItemsService
from .recipes_service import RecipeResult, RecipesService
from .snapshot_cache_service import SnapshotCacheService

__all__ = [
    "BackgroundTaskRunner",
    "PoolCacheService",
    "SnapshotCacheService",
    "RecentItemsService",
    "NameGenerator",
    "NamesService",
    "NamesResult",
    "IncineratorService",
    "RecipesService",
    "RecipeResult",
]
