"""
Tests for the RNG determinism contract.

Travel mechanics must roll through DiceRoller so a seeded session replays
exactly. This test wraps the random module's functions and records any call
made directly from a travel module.
"""

import random
import sys

import pytest

from hexcrawl.data_models import DiceRoller
from hexcrawl.hex_crawl.hex_crawl_engine import HexcrawlEngine
from hexcrawl.hex_crawl.hex_procedure import HexProcedure


# Modules that should never call random.* directly
TRAVEL_MODULES = (
    "hexcrawl.hex_crawl",
    "hexcrawl.weather",
    "hexcrawl.game_state",
    "hexcrawl.main",
)

TRAPPED_FUNCTIONS = ("randint", "choice", "random", "uniform", "randrange", "shuffle", "sample")


@pytest.fixture
def trap_random(monkeypatch):
    """Record every random.* call made from a travel module."""
    violations: list[tuple[str, str]] = []

    def make_trap(name, original):
        def wrapper(*args, **kwargs):
            caller = sys._getframe(1).f_globals.get("__name__", "unknown")
            if caller.startswith(TRAVEL_MODULES):
                violations.append((name, caller))
            return original(*args, **kwargs)
        return wrapper

    for name in TRAPPED_FUNCTIONS:
        monkeypatch.setattr(random, name, make_trap(name, getattr(random, name)))
    yield violations


class TestRngDeterminismContract:
    """Travel mechanics roll through DiceRoller."""

    def test_weather_roll(self, engine, seeded_dice, trap_random):
        for _ in range(20):
            engine.roll_weather()
        assert trap_random == []

    def test_hex_procedure_rolls(self, engine, seeded_dice, trap_random):
        procedure = HexProcedure(engine, 1, 0)
        procedure.roll_check("navigator", modifier=2)
        procedure.roll_check("forager", modifier=-1)
        procedure.roll_encounter()
        procedure.complete()
        assert trap_random == []

    def test_dice_roller_is_the_only_caller(self, seeded_dice, trap_random):
        DiceRoller.roll_d20("direct")
        assert trap_random == []


class TestSeededTravelReplays:
    """The same seed produces the same journey."""

    def _journey(self, engine_factory):
        engine = engine_factory()
        results = []
        for day in range(3):
            results.append(engine.roll_weather())
            procedure = HexProcedure(engine, day, 0)
            procedure.roll_check("navigator")
            results.append(procedure.roll_encounter())
            procedure.complete()
            engine.end_day()
        return results, engine.state.survival_meter.current

    def test_replay(self, terrain_index, clean_dice):
        DiceRoller.set_seed(2024)
        first = self._journey(lambda: HexcrawlEngine(terrain_index=terrain_index))
        DiceRoller.set_seed(2024)
        second = self._journey(lambda: HexcrawlEngine(terrain_index=terrain_index))
        assert first == second
