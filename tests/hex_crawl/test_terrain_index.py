"""
Tests for the sparse terrain and climate index.
"""

import pytest

from hexcrawl.data_models import ClimateType, TerrainType
from hexcrawl.hex_crawl.terrain_index import HexClimate, HexTerrain, TerrainIndex


class TestTerrain:
    """Terrain painting and the plains fallback."""

    def test_unassigned_hex_is_plains(self):
        index = TerrainIndex()
        assert index.get_terrain(3, 7) == TerrainType.PLAINS
        assert not index.has_terrain(3, 7)

    def test_set_and_get(self):
        index = TerrainIndex()
        index.set_terrain(3, 7, TerrainType.SWAMP)
        assert index.get_terrain(3, 7) == TerrainType.SWAMP
        assert index.get_terrain(7, 3) == TerrainType.PLAINS

    def test_set_accepts_string_value(self):
        index = TerrainIndex()
        index.set_terrain(0, 0, "river-crossing")
        assert index.get_terrain(0, 0) == TerrainType.RIVER_CROSSING

    def test_clear_restores_plains(self):
        index = TerrainIndex()
        index.set_terrain(1, 1, TerrainType.DESERT)
        index.set_custom_description(1, 1, "Bleached bones")
        index.clear_terrain(1, 1)
        assert index.get_terrain(1, 1) == TerrainType.PLAINS
        assert index.get_custom_description(1, 1) is None

    def test_clear_unpainted_is_noop(self):
        index = TerrainIndex()
        index.clear_terrain(4, 4)
        assert len(index) == 0

    def test_load_replaces_existing(self):
        index = TerrainIndex()
        index.set_terrain(9, 9, TerrainType.ARCTIC)
        index.load_terrain_data([
            {"col": 0, "row": 0, "terrain": "forest"},
            HexTerrain(1, 0, TerrainType.HILLS),
        ])
        assert index.get_terrain(9, 9) == TerrainType.PLAINS
        assert index.get_terrain(0, 0) == TerrainType.FOREST
        assert index.get_terrain(1, 0) == TerrainType.HILLS
        assert len(index) == 2

    def test_load_unknown_terrain_raises(self):
        index = TerrainIndex()
        with pytest.raises(ValueError):
            index.load_terrain_data([{"col": 0, "row": 0, "terrain": "lava-lake"}])

    def test_custom_descriptions(self):
        index = TerrainIndex()
        index.load_terrain_data([
            {"col": 2, "row": 2, "terrain": "forest", "customDescription": "A ring of standing stones"},
        ])
        assert index.get_custom_description(2, 2) == "A ring of standing stones"
        index.set_custom_description(2, 2, "")
        assert index.get_custom_description(2, 2) is None

    def test_export_round_trip(self):
        index = TerrainIndex()
        index.set_terrain(0, 0, TerrainType.ROAD)
        index.set_terrain(1, 0, TerrainType.FOREST)
        index.set_custom_description(1, 0, "Old woods")
        exported = [t.to_dict() for t in index.terrain_assignments()]
        restored = TerrainIndex(terrain=exported)
        assert restored.get_terrain(1, 0) == TerrainType.FOREST
        assert restored.get_custom_description(1, 0) == "Old woods"
        assert {"col": 0, "row": 0, "terrain": "road"} in exported


class TestClimate:
    """Climate has no fallback."""

    def test_unassigned_is_none(self):
        assert TerrainIndex().get_climate(0, 0) is None

    def test_set_clear(self):
        index = TerrainIndex()
        index.set_climate(0, 0, ClimateType.VOLCANIC)
        assert index.get_climate(0, 0) == ClimateType.VOLCANIC
        index.clear_climate(0, 0)
        assert index.get_climate(0, 0) is None

    def test_load_replaces_existing(self):
        index = TerrainIndex()
        index.set_climate(5, 5, ClimateType.ARID)
        index.load_climate_data([{"col": 1, "row": 2, "climate": "maritime"}])
        assert index.get_climate(5, 5) is None
        assert index.get_climate(1, 2) == ClimateType.MARITIME

    def test_climate_independent_of_terrain(self):
        index = TerrainIndex()
        index.set_climate(0, 0, ClimateType.ARCTIC)
        assert index.get_terrain(0, 0) == TerrainType.PLAINS

    def test_export(self):
        index = TerrainIndex(climate=[HexClimate(3, 4, ClimateType.TROPICAL)])
        assert index.climate_assignments() == [HexClimate(3, 4, ClimateType.TROPICAL)]
        assert index.climate_assignments()[0].to_dict() == {"col": 3, "row": 4, "climate": "tropical"}
