"""Snapshot cache domain entities."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Freshness(Enum):
    """Age band of a stored snapshot."""

    FRESH = "fresh"      # Within fresh TTL, served as-is
    STALE = "stale"      # Past fresh TTL, served while refreshing in background
    EXPIRED = "expired"  # Past stale TTL or missing, recomputed synchronously


@dataclass(frozen=True)
class SnapshotEntity:
    """A single computed aggregate and the time it was computed.

    Attributes:
        data: The computed object
        timestamp: Unix timestamp of the computation
    """

    data: dict[str, Any]
    timestamp: float

    def age_seconds(self, now: float) -> float:
        """Seconds elapsed between the computation and ``now``."""
        return now - self.timestamp


@dataclass(frozen=True)
class SnapshotResultEntity:
    """Snapshot handed to a caller by SnapshotCacheService.get.

    Attributes:
        data: The snapshot data to serve
        freshness: Band the stored snapshot was in when the request arrived
        age_seconds: Age of the served data (0 for a fresh recompute)
        degraded: True when an old snapshot is served because recompute failed
    """

    data: dict[str, Any]
    freshness: Freshness
    age_seconds: float
    degraded: bool = False
