"""Synthetic road networks and point sets for the test suite."""

import heapq
import math
import random

from bearmaps.domain.models import RoadNode, Way
from bearmaps.graph.road_graph import EARTH_RADIUS_MILES

BASE_LON = -122.2558593750
BASE_LAT = 37.8574989903859

# One mile of latitude, in degrees.
MILE_LAT = math.degrees(1 / EARTH_RADIUS_MILES)


def line_graph(labels="ABCDE", spacing_miles=1.0):
    """Nodes due north of each other, one way through all of them."""
    nodes = [
        RoadNode(id=label, lat=BASE_LAT + i * spacing_miles * MILE_LAT, lon=BASE_LON)
        for i, label in enumerate(labels)
    ]
    ways = [Way(id="line", node_ids=tuple(labels))]
    return nodes, ways


def random_points(n, seed, spread=0.05):
    rng = random.Random(seed)
    return [
        (
            BASE_LON + rng.uniform(-spread, spread),
            BASE_LAT + rng.uniform(-spread, spread),
        )
        for _ in range(n)
    ]


def grid_graph(rows, cols, seed, keep=0.8, id_offset=0, lat_shift=0.0):
    """Jittered grid with a random subset of street segments kept.

    Diagonal shortcuts are added now and then so that the straight-line
    heuristic is not trivially exact.
    """
    rng = random.Random(seed)
    step = 0.002

    def node_id(r, c):
        return id_offset + r * cols + c

    nodes = []
    for r in range(rows):
        for c in range(cols):
            nodes.append(
                RoadNode(
                    id=node_id(r, c),
                    lat=BASE_LAT + lat_shift + r * step + rng.uniform(-0.0005, 0.0005),
                    lon=BASE_LON + c * step + rng.uniform(-0.0005, 0.0005),
                )
            )

    ways = []
    for r in range(rows):
        for c in range(cols):
            if c + 1 < cols and rng.random() < keep:
                ways.append(Way(id=len(ways), node_ids=(node_id(r, c), node_id(r, c + 1))))
            if r + 1 < rows and rng.random() < keep:
                ways.append(Way(id=len(ways), node_ids=(node_id(r, c), node_id(r + 1, c))))
            if r + 1 < rows and c + 1 < cols and rng.random() < 0.1:
                ways.append(
                    Way(id=len(ways), node_ids=(node_id(r, c), node_id(r + 1, c + 1)))
                )
    return nodes, ways


def dijkstra_distances(graph, start):
    """Reference single-source shortest distances, independent of A*."""
    distances = {start: 0.0}
    heap = [(0.0, start)]
    visited = set()
    while heap:
        d, u = heapq.heappop(heap)
        if u in visited:
            continue
        visited.add(u)
        for v in graph.neighbors(u):
            nd = d + graph.distance(u, v)
            if nd < distances.get(v, float("inf")):
                distances[v] = nd
                heapq.heappush(heap, (nd, v))
    return distances
