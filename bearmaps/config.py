"""Centralized configuration using Pydantic Settings.

This module provides a single source of truth for all configuration:
- the projection reference point used by the spatial index
- map data location and the road classes kept at ingestion
- routing search limits
- logging

Configuration can be overridden via environment variables:
- BEARMAPS_PROJECTION_REF_LON=-122.26
- BEARMAPS_GRAPH_DATA_DIR=/path/to/data
- BEARMAPS_ROUTING_SEARCH_TIMEOUT_SECONDS=2.5
- BEARMAPS_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Bounds of the Berkeley root tile.
ROOT_ULLAT = 37.892195547244356
ROOT_ULLON = -122.2998046875
ROOT_LRLAT = 37.82280243352756
ROOT_LRLON = -122.2119140625

DEFAULT_ALLOWED_HIGHWAYS = (
    "motorway",
    "trunk",
    "primary",
    "secondary",
    "tertiary",
    "unclassified",
    "residential",
    "living_street",
    "motorway_link",
    "trunk_link",
    "primary_link",
    "secondary_link",
    "tertiary_link",
)


class ProjectionConfig(BaseSettings):
    """Reference point of the transverse Mercator flattening.

    Environment variables prefixed with BEARMAPS_PROJECTION_.
    """

    model_config = SettingsConfigDict(env_prefix="BEARMAPS_PROJECTION_")

    ref_lon: float = Field(default=(ROOT_ULLON + ROOT_LRLON) / 2, ge=-180, le=180)
    ref_lat: float = Field(default=(ROOT_ULLAT + ROOT_LRLAT) / 2, ge=-90, le=90)
    scale_factor: float = Field(default=1.0, gt=0)


class GraphConfig(BaseSettings):
    """Map data configuration.

    Environment variables prefixed with BEARMAPS_GRAPH_.
    """

    model_config = SettingsConfigDict(env_prefix="BEARMAPS_GRAPH_")

    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "data"
    )
    osm_file: str = "berkeley-2018.osm.xml"
    allowed_highways: frozenset[str] = frozenset(DEFAULT_ALLOWED_HIGHWAYS)

    @property
    def osm_path(self) -> Path:
        """Full path to the OSM XML file."""
        return self.data_dir / self.osm_file


class RoutingConfig(BaseSettings):
    """Path search configuration.

    Environment variables prefixed with BEARMAPS_ROUTING_.
    """

    model_config = SettingsConfigDict(env_prefix="BEARMAPS_ROUTING_")

    # None disables the per-search deadline
    search_timeout_seconds: Optional[float] = Field(default=None, gt=0)


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with BEARMAPS_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="BEARMAPS_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations can be accessed via attributes:

        config = get_config()
        print(config.projection.ref_lon)
        print(config.graph.osm_path)

    Environment variables prefixed with BEARMAPS_.
    """

    model_config = SettingsConfigDict(env_prefix="BEARMAPS_")

    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
