"""Graph ports - Abstractions for graph loading, lookup and routing.

These protocols define the contracts between the routing service and
whatever supplies the road network, snaps coordinates and solves paths.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import NodeId, RoadNode, RouteResult
    from ..graph.cancellation import CancellationToken
    from ..graph.road_graph import RoadGraph


class GraphRepositoryPort(Protocol):
    """Port for loading the road network.

    Implementations:
    - adapters/graph/osm_repository.py (OSMGraphRepository)
    - adapters/graph/memory_repository.py (InMemoryGraphRepository)

    The repository is responsible for building the graph once and
    caching it; the returned graph is immutable.
    """

    def load(self) -> RoadGraph:
        """Load the road graph.

        Returns:
            The fully built, pruned graph.
        """
        ...

    def get_node(self, node_id: NodeId) -> Optional[RoadNode]:
        """Get node details by id.

        Args:
            node_id: The node id to look up.

        Returns:
            The node, or None if it is not part of the graph.
        """
        ...


class NearestNodePort(Protocol):
    """Port for snapping raw coordinates to graph nodes.

    Implementation: graph/kdtree.py (SpatialIndex)
    """

    def closest(self, lon: float, lat: float) -> NodeId:
        """Return the id of the node nearest to (lon, lat)."""
        ...


class RouteSolverPort(Protocol):
    """Port for route computation.

    Implementation: adapters/graph/astar_solver.py (AStarRouteSolver)
    """

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
            cancellation: Optional token checked while searching.

        Returns:
            RouteResult with path, distance, and node details.
        """
        ...
