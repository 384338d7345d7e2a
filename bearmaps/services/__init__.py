"""Services layer - Application orchestrators built on the ports."""

from .routing_service import RoutingService

__all__ = ["RoutingService"]
