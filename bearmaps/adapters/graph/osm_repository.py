"""OpenStreetMap Graph Repository adapter.

This adapter turns an OSM XML extract into a RoadGraph:
- Configuration injection (file path, kept road classes)
- Caching of the built graph
- Typed errors for unreadable or malformed files
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union

from ...config import GraphConfig, get_config
from ...domain.errors import GraphLoadError
from ...domain.models import NodeId, RoadNode, Way
from ...graph.road_graph import GraphBuilder, RoadGraph
from ...observability import log_duration


@dataclass
class OSMGraphRepository:
    """Graph repository that loads from an OSM XML file.

    This adapter implements GraphRepositoryPort. Only ways tagged with
    an allowed ``highway`` value become road segments.

    Attributes:
        config: Graph configuration (paths, allowed road classes)
    """

    config: GraphConfig = field(default_factory=lambda: get_config().graph)
    _logger: logging.Logger = field(init=False, repr=False)

    # Cached data
    _graph: Optional[RoadGraph] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def load(self) -> RoadGraph:
        """Load the road graph from the configured OSM file.

        Returns:
            The built road graph.

        Raises:
            GraphLoadError: If the file cannot be read or parsed.
            DanglingReferenceError: If a kept way references a missing node.
        """
        if self._graph is not None:
            return self._graph

        path = self.config.osm_path
        self._logger.debug("Loading graph", extra={"osm_path": str(path)})

        try:
            with log_duration(self._logger, "OSM parse", osm_path=str(path)) as timing:
                builder = GraphBuilder()
                for element in self._iter_elements(path):
                    if isinstance(element, RoadNode):
                        builder.add_node(element)
                    else:
                        builder.add_way(element)
                graph = builder.build()
                timing["nodes"] = len(graph)
        except (OSError, ET.ParseError, KeyError, ValueError) as e:
            raise GraphLoadError(
                f"Failed to load graph: {e}",
                file_path=str(path),
                cause=e,
            )

        self._graph = graph
        self._logger.info("Graph loaded", extra={"nodes": len(graph)})
        return graph

    def _iter_elements(self, path: Path) -> Iterator[Union[RoadNode, Way]]:
        """Yield nodes and kept ways in document order."""
        allowed = self.config.allowed_highways
        root = None
        for event, elem in ET.iterparse(str(path), events=("start", "end")):
            if root is None:
                root = elem
            if event == "start":
                continue
            if elem.tag == "node":
                tags = self._tags(elem)
                yield RoadNode(
                    id=int(elem.attrib["id"]),
                    lat=float(elem.attrib["lat"]),
                    lon=float(elem.attrib["lon"]),
                    name=tags.get("name"),
                )
            elif elem.tag == "way":
                tags = self._tags(elem)
                if tags.get("highway") in allowed:
                    refs = tuple(int(nd.attrib["ref"]) for nd in elem.iter("nd"))
                    yield Way(id=int(elem.attrib["id"]), node_ids=refs)
            elif elem.tag != "relation":
                continue
            # Drop finished top-level elements.
            root.clear()

    @staticmethod
    def _tags(elem: ET.Element) -> dict[str, str]:
        return {t.attrib["k"]: t.attrib["v"] for t in elem.iter("tag")}

    def get_node(self, node_id: NodeId) -> Optional[RoadNode]:
        """Get node details by id, or None if not part of the graph."""
        graph = self.load()
        if node_id not in graph:
            return None
        return graph.node(node_id)

    def clear_cache(self) -> None:
        """Clear the cached graph."""
        self._graph = None
        self._logger.debug("Graph cache cleared")

