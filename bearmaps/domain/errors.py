"""Typed domain errors for the road-network core.

Every failure a caller can observe is one of these types, never a
silent default such as a ``0.0`` coordinate or an empty path.

All errors inherit from BearMapsError and can optionally wrap a root
cause exception for debugging. Ordinary query failures share the
QueryError base; broken internal invariants use InvariantViolationError,
which is deliberately outside that hierarchy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Optional


@dataclass
class BearMapsError(Exception):
    """Base error for the road-network domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class GraphBuildError(BearMapsError):
    """Graph construction was aborted; no partial graph is returned."""


@dataclass
class DanglingReferenceError(GraphBuildError):
    """A way references a node id that is not in the node set.

    Attributes:
        way_id: Identifier of the offending way
        node_id: The missing node id
    """

    way_id: Optional[Hashable] = None
    node_id: Optional[Hashable] = None


@dataclass
class GraphLoadError(BearMapsError):
    """Map data could not be read or parsed.

    Attributes:
        file_path: Path to the map data file if relevant
    """

    file_path: Optional[str] = None


@dataclass
class QueryError(BearMapsError):
    """Base for ordinary query failures returned to callers."""


@dataclass
class NodeNotFoundError(QueryError):
    """Node id not present in the road graph.

    Attributes:
        node_id: The id that was looked up
    """

    node_id: Optional[Hashable] = None


@dataclass
class InvalidCoordinateError(QueryError):
    """A query coordinate lies outside the valid latitude or longitude range.

    Attributes:
        longitude: Longitude as given by the caller
        latitude: Latitude as given by the caller
    """

    longitude: Optional[float] = None
    latitude: Optional[float] = None


@dataclass
class EmptyIndexError(QueryError):
    """Nearest-node query against an index built from zero nodes."""


@dataclass
class UnreachableError(QueryError):
    """No path exists between the requested nodes.

    Attributes:
        start_id: Start node id
        dest_id: Destination node id
    """

    start_id: Optional[Hashable] = None
    dest_id: Optional[Hashable] = None


@dataclass
class SearchCancelledError(QueryError):
    """The search was aborted by its cancellation token or deadline.

    Attributes:
        expanded: Number of nodes finalized before the abort
    """

    expanded: int = 0


@dataclass
class InvariantViolationError(BearMapsError):
    """Internal state contradicts an invariant; this is a programming error.

    Attributes:
        node_id: Node at which the violation was detected
    """

    node_id: Optional[Hashable] = None
