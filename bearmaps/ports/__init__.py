"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the application core and external
adapters. They enable dependency injection and make the system testable.
"""

from .graph import GraphRepositoryPort, NearestNodePort, RouteSolverPort

__all__ = [
    "GraphRepositoryPort",
    "NearestNodePort",
    "RouteSolverPort",
]
