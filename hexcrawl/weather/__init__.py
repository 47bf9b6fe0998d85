"""
Weather for hexcrawl travel.

Implements the d12 weather roll that opens each travel day.
"""

from hexcrawl.weather.weather_types import (
    WeatherEntry,
    WeatherResult,
    WEATHER_ROLL_TABLE,
    roll_weather,
    weather_for_roll,
)

__all__ = [
    "WeatherEntry",
    "WeatherResult",
    "WEATHER_ROLL_TABLE",
    "roll_weather",
    "weather_for_roll",
]
