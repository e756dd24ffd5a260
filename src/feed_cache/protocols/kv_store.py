"""Key-value store protocol.

Defines the interface for the shared store the cache services read and
write. Values are JSON-serialisable Python objects; the store is
eventually consistent and offers no transactions, so callers only use
read-modify-write.

Implementations can include:
- Redis (default)
- In-process dictionary (local development, tests)
- Any other key-value service with get/put/delete
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KVStore(Protocol):
    """Protocol for key-value store backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        from feed_cache.protocols import KVStore

        store: KVStore = RedisKVRepository.create()
        await store.put("names_cache", {"items": [], "fetched_at": 0.0})
        ```
    """

    async def get(self, key: str) -> Any | None:
        """Read a value.

        Args:
            key: The storage key

        Returns:
            The decoded JSON value, or None if the key is absent
        """
        ...

    async def put(self, key: str, value: Any, expiration_ttl: int | None = None) -> None:
        """Write a value, replacing any previous one.

        Args:
            key: The storage key
            value: JSON-serialisable value
            expiration_ttl: Optional time-to-live in seconds
        """
        ...

    async def delete(self, key: str) -> None:
        """Delete a key. Deleting an absent key is not an error.

        Args:
            key: The storage key
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
