"""A* shortest-path search over a RoadGraph.

Edge cost and heuristic are both great-circle distances, so the
heuristic is admissible and consistent and a node never needs to be
reopened once finalized.

The frontier is a binary heap without decrease-key: improved entries are
pushed again and stale ones are dropped when popped, by checking the
closed set.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from typing import Dict, List, Optional, Set, Tuple

from ..domain.errors import (
    InvariantViolationError,
    NodeNotFoundError,
    UnreachableError,
)
from ..domain.models import NodeId
from .cancellation import CancellationToken
from .road_graph import RoadGraph

logger = logging.getLogger(__name__)


class PathFinder:
    """Runs independent A* searches over a shared read-only graph.

    All search state is local to a single shortest_path() call, so one
    PathFinder can serve concurrent callers.
    """

    def __init__(self, graph: RoadGraph) -> None:
        self.graph = graph

    def shortest_path(
        self,
        start_id: NodeId,
        dest_id: NodeId,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[NodeId]:
        """Return node ids from start_id to dest_id inclusive.

        Raises:
            NodeNotFoundError: If either endpoint is not in the graph.
            UnreachableError: If the frontier empties first.
            SearchCancelledError: If the token fires mid-search.
            InvariantViolationError: If the predecessor chain is broken.
        """
        for node_id in (start_id, dest_id):
            if node_id not in self.graph:
                raise NodeNotFoundError(
                    f"Node not in graph: {node_id}", node_id=node_id
                )

        if start_id == dest_id:
            return [start_id]

        graph = self.graph

        def heuristic(node_id: NodeId) -> float:
            return graph.distance(node_id, dest_id)

        cost_from_start: Dict[NodeId, float] = {start_id: 0.0}
        predecessor: Dict[NodeId, NodeId] = {}
        closed: Set[NodeId] = set()
        # The counter keeps heap entries comparable for opaque node ids.
        tie = itertools.count()
        frontier: List[Tuple[float, int, NodeId]] = [
            (heuristic(start_id), next(tie), start_id)
        ]

        while frontier:
            if cancellation is not None:
                cancellation.raise_if_cancelled(expanded=len(closed))

            _, _, u = heapq.heappop(frontier)
            if u in closed:
                continue
            if u == dest_id:
                logger.debug(
                    "A* reached destination",
                    extra={"expanded": len(closed), "frontier": len(frontier)},
                )
                return self._reconstruct(predecessor, start_id, dest_id)

            closed.add(u)
            base = cost_from_start[u]
            for v in graph.neighbors(u):
                if v in closed:
                    continue
                candidate = base + graph.distance(u, v)
                if candidate < cost_from_start.get(v, math.inf):
                    cost_from_start[v] = candidate
                    predecessor[v] = u
                    heapq.heappush(frontier, (candidate + heuristic(v), next(tie), v))

        raise UnreachableError(
            f"No path from {start_id} to {dest_id}",
            start_id=start_id,
            dest_id=dest_id,
        )

    @staticmethod
    def _reconstruct(
        predecessor: Dict[NodeId, NodeId], start_id: NodeId, dest_id: NodeId
    ) -> List[NodeId]:
        path = [dest_id]
        current = dest_id
        while current != start_id:
            try:
                current = predecessor[current]
            except KeyError:
                raise InvariantViolationError(
                    f"Reached node {current} has no predecessor",
                    node_id=current,
                ) from None
            if len(path) > len(predecessor):
                raise InvariantViolationError(
                    "Predecessor chain does not terminate at the start node",
                    node_id=current,
                )
            path.append(current)
        path.reverse()
        return path
