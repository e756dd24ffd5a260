"""Pool cache domain entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class PoolEntryEntity:
    """A pool of pre-fetched items stored under one key.

    Items are consumed from the front (FIFO). An entry is never stored
    with zero items; the key is deleted instead.

    Attributes:
        items: Opaque JSON objects, oldest first
        fetched_at: Unix timestamp of the most recent append
    """

    items: list[dict[str, Any]] = field(default_factory=list)
    fetched_at: float = 0.0


@dataclass(frozen=True)
class TakeResultEntity:
    """Outcome of a single take from the pool.

    Attributes:
        items: Items removed from the front of the pool (may be empty)
        remaining: Pool size after the take, or the untouched size when
            nothing was taken
    """

    items: list[dict[str, Any]]
    remaining: int


class PoolSource(Enum):
    """Where the items of an acquisition came from."""

    POOL = "pool"          # Entirely served from the stored pool
    UPSTREAM = "upstream"  # Shortfall filled by a synchronous fetch


@dataclass(frozen=True)
class PoolAcquisitionEntity:
    """Items handed to a caller by PoolCacheService.acquire.

    Attributes:
        items: Items to serve, at most the requested count
        remaining: Pool size observed after the take
        source: Whether a synchronous upstream fetch was needed
        refill_scheduled: True if a background refill was started
    """

    items: list[dict[str, Any]]
    remaining: int
    source: PoolSource
    refill_scheduled: bool = False
