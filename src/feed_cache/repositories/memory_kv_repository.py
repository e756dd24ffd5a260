"""In-process implementation of KVStore.

Used for local development without Redis (``KV_BACKEND=memory``) and in
tests. Values are round-tripped through JSON so callers never share
mutable state with the store, matching what a remote store does.
"""

import json
import time
from collections.abc import Callable
from typing import Any


class InMemoryKVRepository:
    """Dictionary-backed key-value store with optional expiry.

    Satisfies the KVStore protocol through structural typing.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty store.

        Args:
            clock: Monotonic clock used for expiry (injectable for tests)
        """
        self._data: dict[str, tuple[str, float | None]] = {}
        self._clock = clock

    async def get(self, key: str) -> Any | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        raw, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return json.loads(raw)

    async def put(self, key: str, value: Any, expiration_ttl: int | None = None) -> None:
        expires_at = self._clock() + expiration_ttl if expiration_ttl else None
        self._data[key] = (json.dumps(value), expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def health_check(self) -> bool:
        return True

    def __contains__(self, key: str) -> bool:
        entry = self._data.get(key)
        return entry is not None and (entry[1] is None or self._clock() < entry[1])
