"""Name entry domain entity."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class NameEntity:
    """A baby name with a short meaning."""

    name: str
    meaning: str

    def as_item(self) -> dict[str, Any]:
        """Plain mapping suitable for a pool item."""
        return asdict(self)
