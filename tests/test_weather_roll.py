"""
Tests for the d12 weather roll.
"""

from collections import Counter

import pytest

from hexcrawl.data_models import DiceRoller, WeatherType
from hexcrawl.observability.run_log import get_run_log
from hexcrawl.weather.weather_types import WEATHER_ROLL_TABLE, roll_weather, weather_for_roll


class TestWeatherBuckets:
    """Exact d12 bucket boundaries."""

    @pytest.mark.parametrize("roll,weather", [
        (1, WeatherType.CLEAR),
        (4, WeatherType.CLEAR),
        (5, WeatherType.OVERCAST),
        (6, WeatherType.OVERCAST),
        (7, WeatherType.FOG),
        (8, WeatherType.RAIN),
        (9, WeatherType.RAIN),
        (10, WeatherType.HEAVY_RAIN),
        (11, WeatherType.THUNDERSTORM),
        (12, WeatherType.SNOW),
    ])
    def test_bucket(self, roll, weather):
        assert weather_for_roll(roll) == weather

    def test_table_covers_one_to_twelve_once(self):
        for roll in range(1, 13):
            assert sum(1 for entry in WEATHER_ROLL_TABLE if entry.matches(roll)) == 1

    @pytest.mark.parametrize("roll", [0, 13])
    def test_out_of_range_raises(self, roll):
        with pytest.raises(ValueError):
            weather_for_roll(roll)


class TestRollWeather:
    """Rolling through the DiceRoller."""

    def test_result_matches_bucket(self, seeded_dice):
        result = roll_weather()
        assert result.weather == weather_for_roll(result.roll)
        assert result.definition.weather_type == result.weather

    def test_logs_table_lookup(self, seeded_dice):
        result = roll_weather()
        lookups = get_run_log().get_table_lookups()
        assert len(lookups) == 1
        assert lookups[0].table_id == "weather"
        assert lookups[0].roll_total == result.roll

    def test_distribution_over_ten_thousand_rolls(self, seeded_dice):
        rolls = 10_000
        counts = Counter(roll_weather().weather for _ in range(rolls))
        DiceRoller.clear_roll_log()

        expected_twelfths = {
            WeatherType.CLEAR: 4,
            WeatherType.OVERCAST: 2,
            WeatherType.FOG: 1,
            WeatherType.RAIN: 2,
            WeatherType.HEAVY_RAIN: 1,
            WeatherType.THUNDERSTORM: 1,
            WeatherType.SNOW: 1,
        }
        assert set(counts) == set(expected_twelfths)
        for weather, twelfths in expected_twelfths.items():
            expected = rolls * twelfths / 12
            assert abs(counts[weather] - expected) < 200, weather
