"""
Pytest fixtures for the hexcrawl travel test suite.

Provides reusable fixtures for dice, engines, painted maps and save directories.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from hexcrawl.data_models import DiceRoller, TerrainType
from hexcrawl.hex_crawl.hex_crawl_engine import HexcrawlEngine
from hexcrawl.hex_crawl.terrain_index import TerrainIndex
from hexcrawl.observability.run_log import reset_run_log


# =============================================================================
# DICE FIXTURES
# =============================================================================


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    DiceRoller.clear_roll_log()
    DiceRoller.set_seed(42)
    yield DiceRoller()
    DiceRoller.clear_roll_log()


@pytest.fixture
def clean_dice():
    """Provide a clean DiceRoller without seed."""
    DiceRoller.clear_roll_log()
    yield DiceRoller()
    DiceRoller.clear_roll_log()


@pytest.fixture(autouse=True)
def fresh_run_log():
    """Each test starts with an empty, unpaused run log."""
    log = reset_run_log()
    log.resume()
    yield log
    log.resume()
    reset_run_log()


# =============================================================================
# ENGINE FIXTURES
# =============================================================================


@pytest.fixture
def terrain_index():
    """
    A small painted map:

        (0,0) road      (1,0) forest     (2,0) mountains
        (0,1) water     (1,1) swamp      (2,1) inferno-river
        everything else plains
    """
    index = TerrainIndex()
    index.set_terrain(0, 0, TerrainType.ROAD)
    index.set_terrain(1, 0, TerrainType.FOREST)
    index.set_terrain(2, 0, TerrainType.MOUNTAINS)
    index.set_terrain(0, 1, TerrainType.WATER)
    index.set_terrain(1, 1, TerrainType.SWAMP)
    index.set_terrain(2, 1, TerrainType.INFERNO_RIVER)
    return index


@pytest.fixture
def engine(terrain_index):
    """Engine on the painted map: day 1, normal pace, clear weather, meter 8/8."""
    return HexcrawlEngine(terrain_index=terrain_index)


# =============================================================================
# PERSISTENCE FIXTURES
# =============================================================================


@pytest.fixture
def temp_save_dir():
    """Create a temporary directory for save files."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)
