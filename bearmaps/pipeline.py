"""High-level entry point: route between two coordinates and describe it.

1. Configure logging.
2. Resolve the routing service from the container (graph is loaded lazily).
3. Snap both coordinates and search.
4. Format the result as a short message.
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .container import Container, get_container
from .observability import configure_logging
from .services import RoutingService


def solve_route(
    start_lon: float,
    start_lat: float,
    dest_lon: float,
    dest_lat: float,
    container: Optional[Container] = None,
) -> str:
    """Run a routing query and return a human-readable message.

    Ordinary query failures come back as messages; load failures and
    invariant violations propagate.
    """
    container = container or get_container()
    service: RoutingService = container.resolve(RoutingService)

    result, error = service.route_safe(start_lon, start_lat, dest_lon, dest_lat)
    if error is not None:
        return error
    if result is None:
        return "No route computed"

    path_str = " -> ".join(str(node_id) for node_id in result.path)
    return (
        f"Shortest path: {path_str}\n"
        f"Total distance: {result.total_distance_miles:.3f} miles"
    )


def run_pipeline(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        description="Shortest road route between two coordinates."
    )
    parser.add_argument("start_lon", type=float)
    parser.add_argument("start_lat", type=float)
    parser.add_argument("dest_lon", type=float)
    parser.add_argument("dest_lat", type=float)
    args = parser.parse_args(argv)

    container = get_container()
    configure_logging(container.config.observability)
    print(
        solve_route(
            args.start_lon, args.start_lat, args.dest_lon, args.dest_lat, container
        )
    )


if __name__ == "__main__":
    run_pipeline()
