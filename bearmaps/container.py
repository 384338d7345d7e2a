"""Dependency wiring for the routing stack.

Ports are bound to factories; each binding is built once, on first
resolve, so map data is only read when a route is actually requested.
Tests swap a binding with ``register`` before resolving.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config


@dataclass
class Container:
    """Lazily built, shared instances keyed by port type.

    Usage:
        container = Container.create_default()
        routing = container.resolve(RoutingService)

    Attributes:
        config: Application configuration the default bindings read from
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _instances: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(self, port_type: type[Any], factory: Callable[[], Any]) -> None:
        """Bind ``port_type`` to ``factory``, dropping any instance already built."""
        with self._lock:
            self._factories[port_type] = factory
            self._instances.pop(port_type, None)

    def resolve(self, port_type: type[Any]) -> Any:
        """Return the shared instance for ``port_type``, building it on first use.

        Raises:
            KeyError: If nothing is bound to the type.
        """
        # Reentrant: factories resolve their own dependencies.
        with self._lock:
            if port_type not in self._instances:
                try:
                    factory = self._factories[port_type]
                except KeyError:
                    raise KeyError(f"Type not registered: {port_type}") from None
                self._instances[port_type] = factory()
            return self._instances[port_type]

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Bind the OSM repository, the A* solver and the routing service.

        The map data is not read until the routing service (or the graph
        repository) is first resolved and used.
        """
        from .adapters.graph import AStarRouteSolver, OSMGraphRepository
        from .graph.projection import Projection
        from .ports.graph import GraphRepositoryPort, RouteSolverPort
        from .services import RoutingService

        config = config or get_config()
        container = cls(config=config)

        container.register(
            GraphRepositoryPort,
            lambda: OSMGraphRepository(config.graph),
        )
        container.register(
            RouteSolverPort,
            lambda: AStarRouteSolver(config.routing),
        )

        def create_routing_service() -> RoutingService:
            return RoutingService(
                graph_repository=container.resolve(GraphRepositoryPort),
                route_solver=container.resolve(RouteSolverPort),
                projection=Projection.from_config(config.projection),
            )

        container.register(RoutingService, create_routing_service)

        return container


_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Return the process-wide container, creating it from ``get_config()``."""
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Forget the process-wide container so the next call rebuilds it."""
    global _default_container
    with _container_lock:
        _default_container = None
