"""Immutable domain models for the road-network core.

All models are frozen dataclasses with slots for memory efficiency.
These models have no external dependencies and describe the raw
ingestion records and the results handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Optional

NodeId = Hashable


@dataclass(frozen=True, slots=True)
class GeoLocation:
    """GPS coordinates representing a geographic location."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )


@dataclass(frozen=True, slots=True)
class RoadNode:
    """An intersection as delivered by ingestion.

    Attributes:
        id: Stable node identifier (OSM node id for map data)
        lat: Latitude in degrees
        lon: Longitude in degrees
        name: Optional display name
    """

    id: NodeId
    lat: float
    lon: float
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Way:
    """An ordered run of node ids forming one road.

    Attributes:
        id: Way identifier
        node_ids: Node ids in travel order along the road
    """

    id: Hashable
    node_ids: tuple[NodeId, ...]


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Result of route computation between two intersections.

    Attributes:
        path: Ordered tuple of node ids, both endpoints included
        total_distance_miles: Sum of great-circle distances along the path
        nodes: Resolved node details for each stop
    """

    path: tuple[NodeId, ...]
    total_distance_miles: float
    nodes: tuple[RoadNode, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """Check if no route was found."""
        return len(self.path) == 0

    @property
    def num_stops(self) -> int:
        """Return the number of stops in the route."""
        return len(self.path)
