"""Immutable road graph of intersections and road segments.

The graph is undirected: every way contributes an edge between each
consecutive pair of its node ids, recorded on both endpoints. Nodes left
without any neighbor once all ways are processed are pruned, so every
node that survives can take part in routing.

Distances are great-circle distances in miles (haversine formula),
valid between any two nodes whether or not they are adjacent.
"""

from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from ..domain.errors import DanglingReferenceError, NodeNotFoundError
from ..domain.models import NodeId, RoadNode, Way

logger = logging.getLogger(__name__)

# Radius of the Earth in miles.
EARTH_RADIUS_MILES = 3963


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two (lat, lon) points in miles."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2.0) ** 2
    a += math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2.0) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial compass bearing in degrees, in the range (-180, 180]."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlambda = math.radians(lon2 - lon1)
    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2)
    x -= math.sin(phi1) * math.cos(phi2) * math.cos(dlambda)
    return math.degrees(math.atan2(y, x))


class RoadGraph:
    """Read-only view over nodes and their symmetric adjacency.

    Instances come from GraphBuilder.build() or RoadGraph.build(); the
    constructor is not meant to be called with unchecked data.
    """

    __slots__ = ("_nodes", "_adjacency")

    def __init__(
        self,
        nodes: Mapping[NodeId, RoadNode],
        adjacency: Mapping[NodeId, Tuple[NodeId, ...]],
    ) -> None:
        self._nodes = MappingProxyType(dict(nodes))
        self._adjacency = MappingProxyType(dict(adjacency))

    @classmethod
    def build(cls, nodes: Iterable[RoadNode], ways: Iterable[Way]) -> RoadGraph:
        builder = GraphBuilder()
        for node in nodes:
            builder.add_node(node)
        for way in ways:
            builder.add_way(way)
        return builder.build()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"RoadGraph(nodes={len(self._nodes)})"

    def node_ids(self) -> frozenset:
        return frozenset(self._nodes)

    def node(self, node_id: NodeId) -> RoadNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(
                f"Node not in graph: {node_id}", node_id=node_id
            ) from None

    def neighbors(self, node_id: NodeId) -> Tuple[NodeId, ...]:
        """Adjacent node ids; empty if the id is absent."""
        return self._adjacency.get(node_id, ())

    def lat(self, node_id: NodeId) -> float:
        return self.node(node_id).lat

    def lon(self, node_id: NodeId) -> float:
        return self.node(node_id).lon

    def distance(self, a: NodeId, b: NodeId) -> float:
        """Great-circle distance in miles between two nodes."""
        na, nb = self.node(a), self.node(b)
        return haversine_miles(na.lat, na.lon, nb.lat, nb.lon)

    def bearing(self, a: NodeId, b: NodeId) -> float:
        """Initial bearing in degrees along the great-circle arc from a to b."""
        na, nb = self.node(a), self.node(b)
        return initial_bearing(na.lat, na.lon, nb.lat, nb.lon)

    def path_distance(self, path: Sequence[NodeId]) -> float:
        """Sum of distances between consecutive nodes of a path."""
        return sum(self.distance(u, v) for u, v in zip(path, path[1:]))


class GraphBuilder:
    """Collects raw nodes and ways, then produces a RoadGraph.

    Ways may be added before or after the nodes they reference; references
    are only checked in build(), which either returns a complete graph or
    raises DanglingReferenceError.
    """

    def __init__(self) -> None:
        self._nodes: Dict[NodeId, RoadNode] = {}
        self._ways: List[Way] = []

    def add_node(self, node: RoadNode) -> None:
        self._nodes[node.id] = node

    def add_way(self, way: Way) -> None:
        self._ways.append(way)

    def build(self) -> RoadGraph:
        # dicts used as insertion-ordered sets
        adjacency: Dict[NodeId, Dict[NodeId, None]] = {}

        for way in self._ways:
            for node_id in way.node_ids:
                if node_id not in self._nodes:
                    raise DanglingReferenceError(
                        f"Way {way.id} references unknown node {node_id}",
                        way_id=way.id,
                        node_id=node_id,
                    )
            for u, v in zip(way.node_ids, way.node_ids[1:]):
                if u == v:
                    continue
                adjacency.setdefault(u, {})[v] = None
                adjacency.setdefault(v, {})[u] = None

        nodes = {
            node_id: node for node_id, node in self._nodes.items() if node_id in adjacency
        }
        pruned = len(self._nodes) - len(nodes)
        logger.debug(
            "Road graph built",
            extra={"nodes": len(nodes), "ways": len(self._ways), "pruned": pruned},
        )
        return RoadGraph(
            nodes, {node_id: tuple(adj) for node_id, adj in adjacency.items()}
        )
