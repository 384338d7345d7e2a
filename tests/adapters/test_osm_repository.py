"""Tests for the OpenStreetMap graph repository adapter."""

import xml.etree.ElementTree as ET

import pytest

from bearmaps.adapters.graph import OSMGraphRepository
from bearmaps.config import GraphConfig
from bearmaps.domain.errors import DanglingReferenceError, GraphLoadError

OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6">
  <node id="1" lat="37.8700" lon="-122.2600"/>
  <node id="2" lat="37.8710" lon="-122.2600">
    <tag k="name" v="Shattuck Avenue &amp; Center Street"/>
  </node>
  <node id="3" lat="37.8720" lon="-122.2600"/>
  <node id="4" lat="37.8730" lon="-122.2600"/>
  <node id="5" lat="37.8740" lon="-122.2600"/>
  <node id="6" lat="37.8750" lon="-122.2600"/>
  <way id="100">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
    <tag k="highway" v="residential"/>
    <tag k="name" v="Shattuck Avenue"/>
  </way>
  <way id="101">
    <nd ref="3"/>
    <nd ref="4"/>
    <tag k="highway" v="footway"/>
  </way>
  <way id="102">
    <nd ref="5"/>
    <nd ref="6"/>
    <tag k="building" v="yes"/>
  </way>
  <relation id="500">
    <member type="way" ref="100" role=""/>
    <tag k="type" v="route"/>
  </relation>
</osm>
"""


@pytest.fixture
def osm_config(tmp_path):
    (tmp_path / "map.osm.xml").write_text(OSM_XML, encoding="utf-8")
    return GraphConfig(data_dir=tmp_path, osm_file="map.osm.xml")


class TestOSMGraphRepository:
    """Test suite for OSMGraphRepository."""

    def test_keeps_only_allowed_road_classes(self, osm_config):
        graph = OSMGraphRepository(osm_config).load()

        assert graph.node_ids() == {1, 2, 3}
        assert set(graph.neighbors(2)) == {1, 3}
        assert graph.neighbors(4) == ()

    def test_reads_node_names_and_coordinates(self, osm_config):
        repository = OSMGraphRepository(osm_config)

        node = repository.get_node(2)
        assert node is not None
        assert node.name == "Shattuck Avenue & Center Street"
        assert node.lat == pytest.approx(37.871)
        assert node.lon == pytest.approx(-122.26)
        assert repository.get_node(4) is None

    def test_parsed_elements_are_released_from_the_document(self, osm_config, monkeypatch):
        real_iterparse = ET.iterparse
        roots = []

        def recording_iterparse(source, events=None):
            for event, elem in real_iterparse(source, events=events):
                if not roots:
                    roots.append(elem)
                yield event, elem

        monkeypatch.setattr(
            "bearmaps.adapters.graph.osm_repository.ET.iterparse", recording_iterparse
        )
        graph = OSMGraphRepository(osm_config).load()

        assert graph.node_ids() == {1, 2, 3}
        assert roots[0].tag == "osm"
        assert len(roots[0]) == 0

    def test_custom_allowed_highways(self, tmp_path):
        (tmp_path / "map.osm.xml").write_text(OSM_XML, encoding="utf-8")
        config = GraphConfig(
            data_dir=tmp_path,
            osm_file="map.osm.xml",
            allowed_highways=frozenset({"residential", "footway"}),
        )

        graph = OSMGraphRepository(config).load()
        assert graph.node_ids() == {1, 2, 3, 4}

    def test_graph_is_cached(self, osm_config):
        repository = OSMGraphRepository(osm_config)
        first = repository.load()

        assert repository.load() is first
        repository.clear_cache()
        assert repository.load() is not first

    def test_missing_file_raises_load_error(self, tmp_path):
        config = GraphConfig(data_dir=tmp_path, osm_file="absent.osm.xml")

        with pytest.raises(GraphLoadError) as excinfo:
            OSMGraphRepository(config).load()

        assert excinfo.value.file_path == str(tmp_path / "absent.osm.xml")
        assert isinstance(excinfo.value.cause, OSError)

    def test_malformed_xml_raises_load_error(self, tmp_path):
        (tmp_path / "bad.osm.xml").write_text("<osm><node id='1'", encoding="utf-8")
        config = GraphConfig(data_dir=tmp_path, osm_file="bad.osm.xml")

        with pytest.raises(GraphLoadError):
            OSMGraphRepository(config).load()

    def test_bad_coordinate_raises_load_error(self, tmp_path):
        (tmp_path / "bad.osm.xml").write_text(
            '<osm><node id="1" lat="north" lon="-122.2"/></osm>', encoding="utf-8"
        )
        config = GraphConfig(data_dir=tmp_path, osm_file="bad.osm.xml")

        with pytest.raises(GraphLoadError):
            OSMGraphRepository(config).load()

    def test_dangling_way_reference_aborts_load(self, tmp_path):
        xml = """<osm>
          <node id="1" lat="37.87" lon="-122.26"/>
          <way id="9"><nd ref="1"/><nd ref="77"/><tag k="highway" v="primary"/></way>
        </osm>"""
        (tmp_path / "dangling.osm.xml").write_text(xml, encoding="utf-8")
        repository = OSMGraphRepository(
            GraphConfig(data_dir=tmp_path, osm_file="dangling.osm.xml")
        )

        with pytest.raises(DanglingReferenceError) as excinfo:
            repository.load()

        assert excinfo.value.node_id == 77
        assert repository._graph is None
