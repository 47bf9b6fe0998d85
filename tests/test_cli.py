"""
Tests for the command-line front end and TravelConfig.
"""

import json
from pathlib import Path

import pytest

from hexcrawl.main import TravelConfig, create_config_from_args, main, parse_arguments


def _run(save_dir, *args):
    return main(["--save-dir", str(save_dir), "--map-id", "coast", *args])


def _record(save_dir):
    data = json.loads((save_dir / "coast.json").read_text(encoding="utf-8"))
    return data["hexcrawl"]


class TestTravelConfig:
    """Configuration defaults and clamps."""

    def test_defaults(self):
        config = TravelConfig()
        assert config.save_dir == Path("saves")
        assert config.meter_max == 8
        assert config.meter_threshold == 2
        assert config.seed is None

    def test_string_path_converted(self):
        assert TravelConfig(save_dir="elsewhere").save_dir == Path("elsewhere")

    def test_meter_clamps(self):
        config = TravelConfig(meter_max=30, meter_threshold=0)
        assert config.meter_max == 12
        assert config.meter_threshold == 1

    def test_from_args(self):
        args = parse_arguments(["--map-id", "moor", "--seed", "5", "-v", "status"])
        config = create_config_from_args(args)
        assert config.map_id == "moor"
        assert config.seed == 5
        assert config.verbose
        assert config.save_filename == "moor.json"


class TestCommands:
    """Each command loads, applies and saves the session."""

    def test_status_creates_session(self, temp_save_dir, capsys):
        assert _run(temp_save_dir, "status") == 0
        out = capsys.readouterr().out
        assert "Day 1" in out
        assert "Movement: 0/4" in out
        record = _record(temp_save_dir)
        assert record["enabled"] is True
        assert record["mapId"] == "coast"

    def test_meter_settings_for_new_session(self, temp_save_dir):
        main(["--save-dir", str(temp_save_dir), "--map-id", "coast", "--meter-max", "10", "status"])
        meter = _record(temp_save_dir)["survivalMeter"]
        assert meter == {"current": 10, "max": 10, "threshold": 2}

    def test_paint_and_move(self, temp_save_dir, capsys):
        _run(temp_save_dir, "paint", "2", "3", "forest")
        _run(temp_save_dir, "move", "2", "3")
        out = capsys.readouterr().out
        assert "for 2 movement" in out
        record = _record(temp_save_dir)
        assert record["partyPosition"] == {"col": 2, "row": 3}
        assert record["hexesMovedToday"] == 2

    def test_move_over_budget_warns(self, temp_save_dir, capsys):
        _run(temp_save_dir, "paint", "1", "1", "mountains")
        _run(temp_save_dir, "move", "1", "1")
        _run(temp_save_dir, "move", "1", "1")
        out = capsys.readouterr().out
        assert "Warning:" in out
        assert _record(temp_save_dir)["hexesMovedToday"] == 6

    def test_place(self, temp_save_dir):
        _run(temp_save_dir, "place", "4", "4")
        record = _record(temp_save_dir)
        assert record["partyPosition"] == {"col": 4, "row": 4}
        assert record["hexesMovedToday"] == 0

    def test_pace_and_weather(self, temp_save_dir, capsys):
        _run(temp_save_dir, "pace", "slow")
        _run(temp_save_dir, "weather", "fog")
        _run(temp_save_dir, "status")
        out = capsys.readouterr().out
        assert "Movement: 0/2" in out
        record = _record(temp_save_dir)
        assert record["pace"] == "slow"
        assert record["currentWeather"] == "fog"

    def test_end_day(self, temp_save_dir, capsys):
        _run(temp_save_dir, "move", "0", "0")
        _run(temp_save_dir, "end-day")
        assert "Day 2 begins" in capsys.readouterr().out
        record = _record(temp_save_dir)
        assert record["currentDay"] == 2
        assert record["hexesMovedToday"] == 0

    def test_roll_weather_with_seed(self, temp_save_dir, clean_dice):
        main(["--save-dir", str(temp_save_dir), "--map-id", "coast", "--seed", "3", "roll-weather"])
        first = _record(temp_save_dir)["currentWeather"]
        (temp_save_dir / "coast.json").unlink()
        main(["--save-dir", str(temp_save_dir), "--map-id", "coast", "--seed", "3", "roll-weather"])
        assert _record(temp_save_dir)["currentWeather"] == first

    def test_invalid_pace_rejected(self, temp_save_dir):
        with pytest.raises(SystemExit):
            _run(temp_save_dir, "pace", "sprint")

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_arguments([])
