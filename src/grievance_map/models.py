"""
Data model for grievance records, block boundaries and aggregated stats.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class GrievanceRecord:
    """A single citizen complaint as reported."""
    id: int
    block: Optional[str]
    grievance: str
    lat: float
    lng: float


@dataclass(frozen=True)
class BoundaryFeature:
    """One block polygon from the boundary GeoJSON."""
    properties: Mapping[str, Any] = field(default_factory=dict)
    geometry: Optional[Mapping[str, Any]] = None

    def name(self, name_property: str) -> Optional[Any]:
        """Raw block name stored under name_property, if any."""
        return (self.properties or {}).get(name_property)


@dataclass(frozen=True)
class RegionStats:
    """
    Aggregated complaints for one block.

    `total` is derived from `records` so it always equals len(records).
    """
    key: str
    label: str
    records: Tuple[GrievanceRecord, ...] = ()

    @property
    def total(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class SelectionState:
    """Currently inspected block; key is None when nothing is selected."""
    key: Optional[str] = None

    @property
    def is_selected(self) -> bool:
        return self.key is not None
