"""Transverse Mercator flattening around a fixed reference point.

The projected plane only gives the spatial index a locally Euclidean
coordinate system. Travel costs stay spherical (see road_graph).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import ProjectionConfig

# |b| reaches 1 a quarter turn from the reference meridian on the equator.
_B_LIMIT = 1.0 - 1e-12


@dataclass(frozen=True, slots=True)
class Projection:
    """Projection centred on (ref_lon, ref_lat) with scale factor k0."""

    ref_lon: float
    ref_lat: float
    k0: float = 1.0

    @classmethod
    def from_config(cls, config: Optional[ProjectionConfig] = None) -> Projection:
        config = config or ProjectionConfig()
        return cls(ref_lon=config.ref_lon, ref_lat=config.ref_lat, k0=config.scale_factor)

    def project(self, lon: float, lat: float) -> Tuple[float, float]:
        """Return the flattened (x, y) for a (lon, lat) pair in degrees."""
        dlon = math.radians(lon - self.ref_lon)
        phi = math.radians(lat)
        b = math.sin(dlon) * math.cos(phi)
        b = max(-_B_LIMIT, min(_B_LIMIT, b))
        x = (self.k0 / 2) * math.log((1 + b) / (1 - b))
        con = math.atan(math.tan(phi) / math.cos(dlon))
        y = self.k0 * (con - math.radians(self.ref_lat))
        return x, y


DEFAULT_PROJECTION = Projection.from_config()


def project(lon: float, lat: float) -> Tuple[float, float]:
    return DEFAULT_PROJECTION.project(lon, lat)
