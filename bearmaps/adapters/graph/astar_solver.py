"""A* Route Solver adapter.

This adapter wraps PathFinder and adds:
- Domain model output (RouteResult)
- Node resolution
- A configured per-search deadline
- Logging
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ...config import RoutingConfig, get_config
from ...domain.errors import UnreachableError
from ...domain.models import NodeId, RouteResult
from ...graph.astar import PathFinder
from ...graph.cancellation import CancellationToken
from ...graph.road_graph import RoadGraph
from ...observability import log_duration


@dataclass
class AStarRouteSolver:
    """Route solver using A* over great-circle distances.

    This adapter implements RouteSolverPort.

    Attributes:
        config: Routing configuration (search deadline)
    """

    config: RoutingConfig = field(default_factory=lambda: get_config().routing)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def solve(
        self,
        graph: RoadGraph,
        start_id: NodeId,
        dest_id: NodeId,
        cancellation: Optional[CancellationToken] = None,
    ) -> RouteResult:
        """Find the shortest path between two nodes.

        Args:
            graph: The road graph.
            start_id: Start node id.
            dest_id: Destination node id.
            cancellation: Optional caller token; when absent and a timeout
                is configured, a deadline token is created.

        Returns:
            RouteResult with path, distance, and node details.

        Raises:
            NodeNotFoundError: If start or destination is not in the graph.
            UnreachableError: If no path exists.
            SearchCancelledError: If the search was cancelled or timed out.
        """
        self._logger.debug(
            "Solving route",
            extra={"start_id": start_id, "dest_id": dest_id},
        )

        if cancellation is None and self.config.search_timeout_seconds is not None:
            cancellation = CancellationToken.with_timeout(
                self.config.search_timeout_seconds
            )

        finder = PathFinder(graph)
        try:
            with log_duration(self._logger, "A* search", start_id=start_id, dest_id=dest_id):
                path = finder.shortest_path(start_id, dest_id, cancellation)
        except UnreachableError:
            self._logger.warning(
                "No route found",
                extra={"start_id": start_id, "dest_id": dest_id},
            )
            raise

        distance = graph.path_distance(path)
        self._logger.info(
            "Route found",
            extra={
                "start_id": start_id,
                "dest_id": dest_id,
                "stops": len(path),
                "distance_miles": distance,
            },
        )

        return RouteResult(
            path=tuple(path),
            total_distance_miles=distance,
            nodes=tuple(graph.node(node_id) for node_id in path),
        )
