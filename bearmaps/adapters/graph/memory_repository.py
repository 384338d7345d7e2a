"""In-memory Graph Repository adapter.

Serves a graph built from nodes and ways that were parsed elsewhere.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ...domain.models import NodeId, RoadNode, Way
from ...graph.road_graph import RoadGraph


@dataclass
class InMemoryGraphRepository:
    """Graph repository over already-parsed elements.

    This adapter implements GraphRepositoryPort. The graph is built on
    the first load() and cached afterwards.

    Attributes:
        nodes: Raw intersections
        ways: Raw ways referencing the nodes
    """

    nodes: Sequence[RoadNode] = ()
    ways: Sequence[Way] = ()
    _graph: Optional[RoadGraph] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load(self) -> RoadGraph:
        if self._graph is None:
            self._graph = RoadGraph.build(self.nodes, self.ways)
            self._logger.info("Graph loaded", extra={"nodes": len(self._graph)})
        return self._graph

    def get_node(self, node_id: NodeId) -> Optional[RoadNode]:
        graph = self.load()
        if node_id not in graph:
            return None
        return graph.node(node_id)
