"""Feed Cache - Merge-variable feeds for display widgets.

Each widget fetches third-party data, flattens it into merge variables
and serves them from a read-through cache in a key-value store.

Layers:
    - protocols: Interface contracts (KVStore, ChatProvider)
    - repositories: Data access implementations (stores, upstream APIs)
    - services: Caching core and widget business logic
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from feed_cache.services import BackgroundTaskRunner, SnapshotCacheService

    snapshot = SnapshotCacheService(store, "sol-incinerator-data", runner, fresh_ttl=300, stale_ttl=3600)
    result = await snapshot.get(compute=fetch_metrics)
    ```

For HTTP API:
    ```python
    from feed_cache.api.app import app
    ```
"""

from feed_cache.config import Settings, get_redis_client, settings
from feed_cache.entities import PoolAcquisitionEntity, SnapshotResultEntity
from feed_cache.handlers import IncineratorHandler, NamesHandler, RecipesHandler
from feed_cache.protocols import ChatProvider, KVStore
from feed_cache.repositories import InMemoryKVRepository, RedisKVRepository, UpstreamFetcher
from feed_cache.services import BackgroundTaskRunner, PoolCacheService, SnapshotCacheService

__all__ = [
    # Configuration
    "Settings",
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "KVStore",
    "ChatProvider",
    # Services (business logic)
    "BackgroundTaskRunner",
    "PoolCacheService",
    "SnapshotCacheService",
    # Handlers (HTTP)
    "NamesHandler",
    "RecipesHandler",
    "IncineratorHandler",
    # Repositories (data access)
    "RedisKVRepository",
    "InMemoryKVRepository",
    "UpstreamFetcher",
    # Entities (domain models)
    "PoolAcquisitionEntity",
    "SnapshotResultEntity",
]
