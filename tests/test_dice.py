"""
Tests for the DiceRoller.
"""

import pytest

from hexcrawl.data_models import DiceRoller
from hexcrawl.observability.run_log import get_run_log


class TestDiceRoller:
    """Tests for dice notation parsing and rolling."""

    def test_d20_in_range(self, seeded_dice):
        for _ in range(100):
            result = DiceRoller.roll_d20("test")
            assert 1 <= result.total <= 20

    def test_d12_in_range(self, seeded_dice):
        for _ in range(100):
            result = DiceRoller.roll_d12("test")
            assert 1 <= result.total <= 12

    def test_positive_modifier(self, seeded_dice):
        result = DiceRoller.roll("1d20+5", "modified")
        assert result.modifier == 5
        assert result.total == result.rolls[0] + 5

    def test_negative_modifier(self, seeded_dice):
        result = DiceRoller.roll("1d20-3", "modified")
        assert result.modifier == -3
        assert result.total == result.rolls[0] - 3

    def test_multiple_dice(self, seeded_dice):
        result = DiceRoller.roll("3d6", "stats")
        assert len(result.rolls) == 3
        assert result.total == sum(result.rolls)

    def test_seed_reproducibility(self, clean_dice):
        DiceRoller.set_seed(7)
        first = [DiceRoller.roll_d12().total for _ in range(20)]
        DiceRoller.set_seed(7)
        second = [DiceRoller.roll_d12().total for _ in range(20)]
        assert first == second

    def test_roll_log(self, seeded_dice):
        DiceRoller.roll("1d6", "first")
        DiceRoller.roll("1d8", "second")
        log = DiceRoller.get_roll_log()
        assert [r.reason for r in log] == ["first", "second"]

    def test_clear_roll_log(self, seeded_dice):
        DiceRoller.roll("1d6", "first")
        DiceRoller.clear_roll_log()
        assert DiceRoller.get_roll_log() == []

    def test_rolls_reach_run_log(self, seeded_dice):
        DiceRoller.roll_d20("encounter check")
        rolls = get_run_log().get_rolls()
        assert len(rolls) == 1
        assert rolls[0].reason == "encounter check"
        assert get_run_log().get_seed() == 42

    def test_str_formats(self, seeded_dice):
        result = DiceRoller.roll("1d4+1", "str")
        assert str(result).startswith("1d4+1: [")
        assert str(result).endswith(f"+ 1 = {result.total}")

    def test_bad_notation_raises(self, clean_dice):
        with pytest.raises(ValueError):
            DiceRoller.roll("twenty", "bad")
