"""Capped list of recently served item keys.

The list only biases future generation away from repeats; nothing
relies on it for uniqueness. Store errors therefore degrade to an empty
list on read and a skipped update on write.
"""

import logging

from feed_cache.protocols import KVStore

logger = logging.getLogger(__name__)


class RecentItemsService:
    """Newest-first list of strings capped at ``max_length``."""

    def __init__(self, store: KVStore, key: str, max_length: int) -> None:
        self._store = store
        self._key = key
        self._max_length = max_length

    async def get(self) -> list[str]:
        """Read the recent list (empty on a miss or a store error)."""
        try:
            value = await self._store.get(self._key)
        except Exception as e:
            logger.warning(f"KV read error ({self._key}): {e!r}")
            return []
        return [str(v) for v in value] if isinstance(value, list) else []

    async def record(self, new_items: list[str], existing: list[str] | None = None) -> list[str]:
        """Put ``new_items`` at the front and trim to the cap.

        Args:
            new_items: Keys just served or generated
            existing: The list as previously read; re-read when None

        Returns:
            The list that was written (or would have been, on a store error)
        """
        if existing is None:
            existing = await self.get()
        updated = (list(new_items) + list(existing))[: self._max_length]
        try:
            await self._store.put(self._key, updated)
        except Exception as e:
            logger.warning(f"KV write error ({self._key}): {e!r}")
        return updated
