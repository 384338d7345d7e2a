"""Routing service - Coordinate-to-coordinate orchestrator.

Snaps raw coordinates to intersections through the spatial index, then
asks the route solver for the shortest path between them.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from ..domain.errors import (
    EmptyIndexError,
    InvalidCoordinateError,
    NodeNotFoundError,
    SearchCancelledError,
    UnreachableError,
)
from ..domain.models import GeoLocation, RoadNode, RouteResult
from ..graph.cancellation import CancellationToken
from ..graph.kdtree import SpatialIndex
from ..graph.projection import Projection
from ..ports.graph import GraphRepositoryPort, NearestNodePort, RouteSolverPort


@dataclass
class RoutingService:
    """Main service for answering routing queries.

    This service orchestrates:
    1. Graph loading (once, through the repository)
    2. Nearest-node snapping of start and destination
    3. Route computation

    Attributes:
        graph_repository: Supplies the road graph
        route_solver: Computes shortest paths
        nearest_nodes: Snaps coordinates; built from the graph when omitted
        projection: Projection for the default spatial index
    """

    graph_repository: GraphRepositoryPort
    route_solver: RouteSolverPort
    nearest_nodes: Optional[NearestNodePort] = None
    projection: Optional[Projection] = None

    _logger: logging.Logger = field(init=False, repr=False)
    _index_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _index(self) -> NearestNodePort:
        if self.nearest_nodes is None:
            with self._index_lock:
                if self.nearest_nodes is None:
                    graph = self.graph_repository.load()
                    self.nearest_nodes = SpatialIndex.build(graph, self.projection)
                    self._logger.info("Spatial index ready", extra={"nodes": len(graph)})
        return self.nearest_nodes

    @staticmethod
    def _locate(lon: float, lat: float) -> GeoLocation:
        try:
            return GeoLocation(latitude=lat, longitude=lon)
        except ValueError as e:
            raise InvalidCoordinateError(
                str(e), cause=e, longitude=lon, latitude=lat
            ) from e

    def nearest(self, lon: float, lat: float) -> RoadNode:
        """Return the intersection closest to (lon, lat).

        Raises:
            InvalidCoordinateError: If (lon, lat) is out of range.
            EmptyIndexError: If the graph has no nodes.
        """
        location = self._locate(lon, lat)
        node_id = self._index().closest(location.longitude, location.latitude)
        node = self.graph_repository.get_node(node_id)
        if node is None:
            raise NodeNotFoundError(
                f"Index returned a node missing from the graph: {node_id}",
                node_id=node_id,
            )
        return node

    def route(
        self,
        start_lon: float,
        start_lat: float,
        dest_lon: float,
        dest_lat: float,
        cancellation: Optional[CancellationToken] = None,
    ) -> RouteResult:
        """Compute the shortest path between two raw coordinates.

        Args:
            start_lon: Longitude of the starting coordinate.
            start_lat: Latitude of the starting coordinate.
            dest_lon: Longitude of the destination coordinate.
            dest_lat: Latitude of the destination coordinate.
            cancellation: Optional token checked while searching.

        Returns:
            RouteResult between the intersections nearest each coordinate.

        Raises:
            InvalidCoordinateError: If either coordinate is out of range.
            EmptyIndexError: If the graph has no nodes.
            UnreachableError: If no path exists.
            SearchCancelledError: If the search was cancelled.
        """
        start = self._locate(start_lon, start_lat)
        dest = self._locate(dest_lon, dest_lat)
        graph = self.graph_repository.load()
        index = self._index()

        start_id = index.closest(start.longitude, start.latitude)
        dest_id = index.closest(dest.longitude, dest.latitude)
        self._logger.info(
            "Endpoints snapped",
            extra={"start_id": start_id, "dest_id": dest_id},
        )

        return self.route_solver.solve(graph, start_id, dest_id, cancellation)

    def route_safe(
        self,
        start_lon: float,
        start_lat: float,
        dest_lon: float,
        dest_lat: float,
        cancellation: Optional[CancellationToken] = None,
    ) -> tuple[Optional[RouteResult], Optional[str]]:
        """Compute a route, returning an error message instead of raising.

        Only ordinary query failures are converted; invariant violations
        and load failures still propagate.

        Returns:
            Tuple of (RouteResult or None, error message or None).
        """
        try:
            result = self.route(start_lon, start_lat, dest_lon, dest_lat, cancellation)
            return result, None
        except InvalidCoordinateError as e:
            return None, f"Invalid coordinate: {e.message}"
        except EmptyIndexError as e:
            return None, f"Error: {e.message}"
        except UnreachableError as e:
            return None, f"No path found between {e.start_id} and {e.dest_id}"
        except SearchCancelledError as e:
            return None, f"Search cancelled after {e.expanded} nodes"
        except NodeNotFoundError as e:
            return None, f"Unknown node: {e.node_id}"

