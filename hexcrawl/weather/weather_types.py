"""
Weather roll table.

Rolls 1d12 at the start of a travel day to pick the day's weather. Only the
common conditions appear on the roll table; the rest (blizzard, hail,
sandstorm, extreme heat and cold) are set by the GM directly.
"""

from dataclasses import dataclass
import logging
from typing import Optional

from hexcrawl.data_models import DiceRoller, WeatherType
from hexcrawl.observability.run_log import get_run_log
from hexcrawl.tables.rule_tables import DEFAULT_RULE_TABLES, RuleTables, WeatherDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherEntry:
    """A single weather table entry."""

    roll_min: int
    roll_max: int
    weather: WeatherType

    def matches(self, roll: int) -> bool:
        """Check if this entry matches the given roll."""
        return self.roll_min <= roll <= self.roll_max


@dataclass
class WeatherResult:
    """The result of rolling on the weather table."""

    weather: WeatherType
    roll: int
    definition: WeatherDefinition

    @property
    def travel_modifier(self) -> float:
        return self.definition.travel_modifier

    def __str__(self) -> str:
        return f"{self.definition.name} (d12: {self.roll})"


# =============================================================================
# WEATHER TABLE
# =============================================================================

WEATHER_ROLL_TABLE: tuple[WeatherEntry, ...] = (
    WeatherEntry(1, 4, WeatherType.CLEAR),
    WeatherEntry(5, 6, WeatherType.OVERCAST),
    WeatherEntry(7, 7, WeatherType.FOG),
    WeatherEntry(8, 9, WeatherType.RAIN),
    WeatherEntry(10, 10, WeatherType.HEAVY_RAIN),
    WeatherEntry(11, 11, WeatherType.THUNDERSTORM),
    WeatherEntry(12, 12, WeatherType.SNOW),
)


def weather_for_roll(roll: int) -> WeatherType:
    """
    Map a d12 result to a weather kind.

    Raises:
        ValueError: if the roll is outside 1-12
    """
    for entry in WEATHER_ROLL_TABLE:
        if entry.matches(roll):
            return entry.weather
    raise ValueError(f"Weather roll {roll} outside 1-12")


def roll_weather(tables: Optional[RuleTables] = None) -> WeatherResult:
    """
    Roll 1d12 on the weather table.

    Args:
        tables: Rule tables used to resolve the weather definition

    Returns:
        WeatherResult with the weather kind, the roll and its definition
    """
    tables = tables or DEFAULT_RULE_TABLES
    dice_result = DiceRoller.roll_d12("weather roll")
    weather = weather_for_roll(dice_result.total)
    definition = tables.get_weather(weather)

    get_run_log().log_table_lookup(
        table_id="weather",
        table_name="Weather (d12)",
        roll_total=dice_result.total,
        result_text=definition.name,
    )
    logger.debug(f"Weather roll {dice_result.total} -> {weather.value}")

    return WeatherResult(weather=weather, roll=dice_result.total, definition=definition)
