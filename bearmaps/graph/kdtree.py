"""Balanced 2-d tree over projected node coordinates.

The tree is stored as an arena: parallel lists indexed by slot, with
child links given as slot numbers (-1 for none). Slot 0 is the root of
a non-empty tree. It keeps node ids only, so the RoadGraph it was built
from must stay alive for callers that want to resolve the ids.

Axis 0 splits on x, axis 1 on y; the axis alternates with depth. The
splitting node is the median of its subset on the active axis, ties
broken by node id so that builds are reproducible.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from ..domain.errors import EmptyIndexError
from ..domain.models import NodeId
from ..observability import log_duration
from .projection import DEFAULT_PROJECTION, Projection
from .road_graph import RoadGraph

logger = logging.getLogger(__name__)

_NONE = -1

_Point = Tuple[float, float, NodeId]


class SpatialIndex:
    """Immutable nearest-node index; queries never mutate it."""

    __slots__ = ("_projection", "_ids", "_xs", "_ys", "_axes", "_left", "_right")

    def __init__(self, points: Sequence[_Point], projection: Projection) -> None:
        self._projection = projection
        self._ids: List[NodeId] = []
        self._xs: List[float] = []
        self._ys: List[float] = []
        self._axes: List[int] = []
        self._left: List[int] = []
        self._right: List[int] = []
        self._build(list(points), 0)

    @classmethod
    def build(
        cls, graph: RoadGraph, projection: Optional[Projection] = None
    ) -> SpatialIndex:
        """Project every graph node and build the tree over them."""
        projection = projection or DEFAULT_PROJECTION
        with log_duration(logger, "Spatial index build", nodes=len(graph)):
            points = [
                (*projection.project(graph.lon(node_id), graph.lat(node_id)), node_id)
                for node_id in graph.node_ids()
            ]
            return cls(points, projection)

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def projection(self) -> Projection:
        return self._projection

    def _build(self, points: List[_Point], depth: int) -> int:
        if not points:
            return _NONE

        axis = depth % 2
        points.sort(key=lambda p: (p[axis], p[2]))
        median = len(points) // 2
        x, y, node_id = points[median]

        slot = len(self._ids)
        self._ids.append(node_id)
        self._xs.append(x)
        self._ys.append(y)
        self._axes.append(axis)
        self._left.append(_NONE)
        self._right.append(_NONE)

        self._left[slot] = self._build(points[:median], depth + 1)
        self._right[slot] = self._build(points[median + 1 :], depth + 1)
        return slot

    def closest(self, lon: float, lat: float) -> NodeId:
        """Id of the node nearest to (lon, lat) in the projected plane."""
        if not self._ids:
            raise EmptyIndexError("Nearest-node query against an empty index")

        qx, qy = self._projection.project(lon, lat)
        best_slot = 0
        best_dist = math.inf

        def descend(slot: int) -> None:
            nonlocal best_slot, best_dist
            if slot == _NONE:
                return

            dist = math.hypot(self._xs[slot] - qx, self._ys[slot] - qy)
            if dist < best_dist:
                best_slot, best_dist = slot, dist

            if self._axes[slot] == 0:
                diff = qx - self._xs[slot]
            else:
                diff = qy - self._ys[slot]

            if diff < 0:
                near, far = self._left[slot], self._right[slot]
            else:
                near, far = self._right[slot], self._left[slot]

            descend(near)
            # The far side cannot beat the current best unless the
            # splitting line itself is strictly closer.
            if abs(diff) < best_dist:
                descend(far)

        descend(0)
        return self._ids[best_slot]
