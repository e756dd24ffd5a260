"""Redis implementation of KVStore.

Values are stored as JSON strings under ``<namespace>:<key>``. It's the
default implementation and satisfies the KVStore protocol.
"""

import json
from typing import Any

import redis.asyncio as redis

from feed_cache.config import get_redis_client, settings


class RedisKVRepository:
    """Redis implementation of the key-value store.

    This class satisfies the KVStore protocol through structural
    typing - no explicit inheritance needed.

    Redis errors (``redis.exceptions.RedisError``) are propagated; the
    cache services decide how to degrade.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize the Redis key-value repository.

        Args:
            redis_client: asyncio Redis client. If None, creates default.
            namespace: Prefix for every key. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._namespace = namespace or settings.kv_namespace

    @classmethod
    def create(cls, namespace: str | None = None) -> "RedisKVRepository":
        """Factory method to create RedisKVRepository with defaults.

        Args:
            namespace: Key prefix. If None, uses settings.

        Returns:
            Configured RedisKVRepository
        """
        return cls(namespace=namespace)

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def get(self, key: str) -> Any | None:
        """Read and decode a JSON value.

        Args:
            key: The storage key (without namespace)

        Returns:
            The decoded value, or None if absent
        """
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    async def put(self, key: str, value: Any, expiration_ttl: int | None = None) -> None:
        """Encode and write a JSON value.

        Args:
            key: The storage key (without namespace)
            value: JSON-serialisable value
            expiration_ttl: Optional time-to-live in seconds
        """
        await self._client.set(self._key(key), json.dumps(value), ex=expiration_ttl)

    async def delete(self, key: str) -> None:
        """Delete a key.

        Args:
            key: The storage key (without namespace)
        """
        await self._client.delete(self._key(key))

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except Exception:
            return False

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
