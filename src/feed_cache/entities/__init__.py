"""Domain entities for internal representation.

These are pure dataclasses used internally by services and
repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
- Pure domain logic only
"""

from .name_entry import NameEntity
from .pool_entry import PoolAcquisitionEntity, PoolEntryEntity, PoolSource, TakeResultEntity
from .snapshot import Freshness, SnapshotEntity, SnapshotResultEntity

__all__ = [
    "NameEntity",
    "PoolEntryEntity",
    "TakeResultEntity",
    "PoolAcquisitionEntity",
    "PoolSource",
    "SnapshotEntity",
    "SnapshotResultEntity",
    "Freshness",
]
