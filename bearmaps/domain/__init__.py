"""Domain layer - Core models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    BearMapsError,
    DanglingReferenceError,
    EmptyIndexError,
    GraphBuildError,
    GraphLoadError,
    InvalidCoordinateError,
    InvariantViolationError,
    NodeNotFoundError,
    QueryError,
    SearchCancelledError,
    UnreachableError,
)
from .models import GeoLocation, NodeId, RoadNode, RouteResult, Way

__all__ = [
    # Models
    "GeoLocation",
    "NodeId",
    "RoadNode",
    "Way",
    "RouteResult",
    # Errors
    "BearMapsError",
    "GraphBuildError",
    "DanglingReferenceError",
    "GraphLoadError",
    "QueryError",
    "NodeNotFoundError",
    "EmptyIndexError",
    "InvalidCoordinateError",
    "UnreachableError",
    "SearchCancelledError",
    "InvariantViolationError",
]
