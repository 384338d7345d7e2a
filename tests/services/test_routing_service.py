"""Tests for the coordinate-level routing service."""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from bearmaps.adapters.graph import AStarRouteSolver, InMemoryGraphRepository
from bearmaps.config import RoutingConfig
from bearmaps.domain.errors import (
    EmptyIndexError,
    InvalidCoordinateError,
    InvariantViolationError,
)
from bearmaps.domain.models import RoadNode, Way
from bearmaps.graph.cancellation import CancellationToken
from bearmaps.graph.kdtree import SpatialIndex
from bearmaps.services import RoutingService
from tests.data.generation import BASE_LAT, BASE_LON, MILE_LAT, line_graph


@pytest.fixture
def service():
    nodes, ways = line_graph()
    return RoutingService(
        graph_repository=InMemoryGraphRepository(nodes, ways),
        route_solver=AStarRouteSolver(RoutingConfig()),
    )


def test_route_between_raw_coordinates(service):
    # Slightly off the A and E intersections.
    result = service.route(
        BASE_LON + 0.0003, BASE_LAT + 0.1 * MILE_LAT,
        BASE_LON - 0.0002, BASE_LAT + 3.8 * MILE_LAT,
    )

    assert result.path == ("A", "B", "C", "D", "E")
    assert result.total_distance_miles == pytest.approx(4.0)


def test_nearest_snaps_to_intersection(service):
    node = service.nearest(BASE_LON, BASE_LAT + 2 * MILE_LAT)
    assert node.id == "C"


def test_index_is_built_once(service):
    service.nearest(BASE_LON, BASE_LAT)
    index = service.nearest_nodes
    service.route(BASE_LON, BASE_LAT, BASE_LON, BASE_LAT + MILE_LAT)
    assert service.nearest_nodes is index


def test_same_snapped_endpoint_gives_single_node_route(service):
    result = service.route(BASE_LON, BASE_LAT, BASE_LON + 0.0001, BASE_LAT)
    assert result.path == ("A",)


def test_injected_index_is_used():
    nodes, ways = line_graph()
    index = MagicMock()
    index.closest.side_effect = ["B", "D"]
    service = RoutingService(
        graph_repository=InMemoryGraphRepository(nodes, ways),
        route_solver=AStarRouteSolver(RoutingConfig()),
        nearest_nodes=index,
    )

    result = service.route(0.0, 0.0, 1.0, 1.0)

    assert result.path == ("B", "C", "D")
    assert index.closest.call_count == 2


def test_route_safe_on_empty_graph():
    service = RoutingService(
        graph_repository=InMemoryGraphRepository(),
        route_solver=AStarRouteSolver(RoutingConfig()),
    )

    with pytest.raises(EmptyIndexError):
        service.nearest(BASE_LON, BASE_LAT)

    result, error = service.route_safe(BASE_LON, BASE_LAT, BASE_LON, BASE_LAT)
    assert result is None
    assert error.startswith("Error:")


def test_route_safe_unreachable():
    nodes = [
        RoadNode(1, BASE_LAT, BASE_LON),
        RoadNode(2, BASE_LAT + 0.001, BASE_LON),
        RoadNode(3, BASE_LAT + 0.05, BASE_LON + 0.05),
        RoadNode(4, BASE_LAT + 0.051, BASE_LON + 0.05),
    ]
    service = RoutingService(
        graph_repository=InMemoryGraphRepository(nodes, [Way(1, (1, 2)), Way(2, (3, 4))]),
        route_solver=AStarRouteSolver(RoutingConfig()),
    )

    result, error = service.route_safe(BASE_LON, BASE_LAT, BASE_LON + 0.05, BASE_LAT + 0.051)

    assert result is None
    assert error == "No path found between 1 and 4"


def test_route_safe_cancelled(service):
    token = CancellationToken()
    token.cancel()

    result, error = service.route_safe(
        BASE_LON, BASE_LAT, BASE_LON, BASE_LAT + 4 * MILE_LAT, token
    )

    assert result is None
    assert error.startswith("Search cancelled")


def test_route_safe_success(service):
    result, error = service.route_safe(BASE_LON, BASE_LAT, BASE_LON, BASE_LAT + MILE_LAT)
    assert error is None
    assert result.path == ("A", "B")


def test_route_safe_does_not_hide_invariant_violations(service):
    solver = MagicMock()
    solver.solve.side_effect = InvariantViolationError("broken chain")
    service.route_solver = solver

    with pytest.raises(InvariantViolationError):
        service.route_safe(BASE_LON, BASE_LAT, BASE_LON, BASE_LAT + MILE_LAT)


@pytest.mark.parametrize(
    "lon,lat",
    [(BASE_LON, 91.0), (BASE_LON, -90.5), (181.0, BASE_LAT), (BASE_LON, float("nan"))],
)
def test_out_of_range_coordinates_are_rejected(service, lon, lat):
    with pytest.raises(InvalidCoordinateError) as exc_info:
        service.nearest(lon, lat)
    assert exc_info.value.longitude == lon
    assert isinstance(exc_info.value.cause, ValueError)

    with pytest.raises(InvalidCoordinateError):
        service.route(BASE_LON, BASE_LAT, lon, lat)


def test_route_safe_reports_invalid_coordinate(service):
    result, error = service.route_safe(BASE_LON, 95.0, BASE_LON, BASE_LAT)

    assert result is None
    assert error.startswith("Invalid coordinate: Latitude must be between -90 and 90")
    # Rejected before any index is built.
    assert service.nearest_nodes is None


def test_quarter_turn_coordinate_snaps_without_error(service):
    node = service.nearest(BASE_LON + 90, 0.0)
    assert node.id == "A"


def test_concurrent_first_queries_build_one_index(service):
    real_build = SpatialIndex.build

    def slow_build(graph, projection=None):
        time.sleep(0.05)
        return real_build(graph, projection)

    barrier = threading.Barrier(8)
    found = []

    def query():
        barrier.wait()
        found.append(service.nearest(BASE_LON, BASE_LAT + 2 * MILE_LAT).id)

    with patch(
        "bearmaps.services.routing_service.SpatialIndex.build", side_effect=slow_build
    ) as build:
        threads = [threading.Thread(target=query) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert build.call_count == 1
    assert found == ["C"] * 8
