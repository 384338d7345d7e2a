"""Graph adapters - Implementations of graph-related ports.

Available implementations:
- OSMGraphRepository: Loads the road graph from an OSM XML file
- InMemoryGraphRepository: Builds the road graph from parsed elements
- AStarRouteSolver: Finds shortest paths using A*
"""

from .astar_solver import AStarRouteSolver
from .memory_repository import InMemoryGraphRepository
from .osm_repository import OSMGraphRepository

__all__ = ["AStarRouteSolver", "InMemoryGraphRepository", "OSMGraphRepository"]
