"""Road-network core: graph, projection, spatial index and path search.

This subpackage builds an in-memory graph from already-parsed nodes and
ways, indexes its intersections for nearest-node lookups, and runs A*
searches on top of it.
"""

from .astar import PathFinder
from .cancellation import CancellationToken
from .kdtree import SpatialIndex
from .projection import DEFAULT_PROJECTION, Projection, project
from .road_graph import (
    EARTH_RADIUS_MILES,
    GraphBuilder,
    RoadGraph,
    haversine_miles,
    initial_bearing,
)

__all__ = [
    "CancellationToken",
    "DEFAULT_PROJECTION",
    "EARTH_RADIUS_MILES",
    "GraphBuilder",
    "PathFinder",
    "Projection",
    "RoadGraph",
    "SpatialIndex",
    "haversine_miles",
    "initial_bearing",
    "project",
]
