"""
Hexcrawl Travel Engine.

Tracks a party crossing a hex map over in-game days. Each day the party gets a
movement budget from its pace and the weather; entering a hex spends movement
points according to the hex's terrain. A survival meter and exhaustion level
track attrition across the journey.

Daily travel loop:
1. Roll or set the day's weather
2. Choose a pace (slow, normal, fast)
3. Move hex by hex, spending movement points; log each hex entered
4. Resolve meter drain and exhaustion from the exploration procedure
5. End the day: movement resets, everything else carries over

The engine is permissive. Moving past the daily budget or onto impassable
terrain is allowed and reported as a warning; the GM can always override the
numbers.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Optional
import logging
import math

from hexcrawl.data_models import (
    ClimateType,
    CorruptHexcrawlStateError,
    HexCoord,
    HexcrawlState,
    MAX_EXHAUSTION_LEVEL,
    RationsState,
    TerrainType,
    TravelLogEntry,
    TravelPace,
    VisitedHex,
    WeatherType,
    utc_timestamp,
)
from hexcrawl.hex_crawl.terrain_index import HexClimate, HexTerrain, TerrainIndex
from hexcrawl.hex_crawl.travel_log import TravelLog
from hexcrawl.observability.run_log import get_run_log
from hexcrawl.tables.rule_tables import (
    DEFAULT_RULE_TABLES,
    PaceDefinition,
    RuleTables,
    TerrainDefinition,
    WeatherDefinition,
)
from hexcrawl.weather.weather_types import roll_weather


logger = logging.getLogger(__name__)


# Bounds for the survival meter settings
METER_MAX_RANGE = (4, 12)
METER_THRESHOLD_RANGE = (1, 4)

# Gallons of water per party member per day
WATER_PER_MEMBER = 1
WATER_PER_MEMBER_EXTREME_HEAT = 2
FOOD_PER_MEMBER = 1


class TravelStatus(str, Enum):
    """Where the party stands in the daily travel cycle."""
    UNINITIALIZED = "uninitialized"  # No party position yet
    IDLE = "idle"  # Movement remains today
    BUDGET_EXHAUSTED = "budget_exhausted"  # Today's budget spent


@dataclass(frozen=True)
class MovementCost:
    """
    Movement points needed to enter a hex.

    Impassable hexes have no finite cost; `points` is None for them.
    """
    points: Optional[int]
    impassable: bool = False

    @classmethod
    def blocked(cls) -> "MovementCost":
        return cls(points=None, impassable=True)

    def __str__(self) -> str:
        return "impassable" if self.impassable else str(self.points)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class HexcrawlEngine:
    """
    State machine for hexcrawl travel on one map.

    Owns a HexcrawlState and reads terrain from a TerrainIndex. Derived values
    (daily budget, remaining movement, hex cost) are recomputed on every call.
    Every mutator refreshes `last_modified` on the state.
    """

    def __init__(
        self,
        state: Optional[HexcrawlState] = None,
        terrain_index: Optional[TerrainIndex] = None,
        tables: Optional[RuleTables] = None,
    ):
        self._state = state or HexcrawlState()
        self._terrain = terrain_index if terrain_index is not None else TerrainIndex()
        self._tables = tables or DEFAULT_RULE_TABLES
        self._log = TravelLog(self._state.travel_log)

    @property
    def state(self) -> HexcrawlState:
        return self._state

    @property
    def terrain_index(self) -> TerrainIndex:
        return self._terrain

    @property
    def tables(self) -> RuleTables:
        return self._tables

    @property
    def travel_log(self) -> TravelLog:
        return self._log

    @property
    def current_day(self) -> int:
        return self._state.current_day

    @property
    def party_position(self) -> Optional[HexCoord]:
        return self._state.party_position

    @property
    def status(self) -> TravelStatus:
        if self._state.party_position is None:
            return TravelStatus.UNINITIALIZED
        if self.can_move_today():
            return TravelStatus.IDLE
        return TravelStatus.BUDGET_EXHAUSTED

    def _touch(self) -> None:
        self._state.last_modified = utc_timestamp()

    # =========================================================================
    # SETTINGS
    # =========================================================================

    def configure(
        self,
        enabled: bool = True,
        meter_max: Optional[int] = None,
        meter_threshold: Optional[int] = None,
    ) -> None:
        """
        Apply tracker settings.

        Args:
            enabled: Whether travel tracking is on for this map
            meter_max: Survival meter size, clamped to 4-12
            meter_threshold: Warning threshold, clamped to 1-4
        """
        meter = self._state.survival_meter
        self._state.enabled = enabled
        if meter_max is not None:
            meter.max = _clamp(meter_max, *METER_MAX_RANGE)
            meter.current = _clamp(meter.current, 0, meter.max)
        if meter_threshold is not None:
            meter.threshold = _clamp(meter_threshold, *METER_THRESHOLD_RANGE)
        logger.debug(
            f"Configured tracker: enabled={enabled}, meter {meter.current}/{meter.max}, "
            f"threshold {meter.threshold}"
        )
        self._touch()

    def set_travel_method(self, method_id: str) -> None:
        """
        Record how the party travels.

        Raises:
            KeyError: if the method is not in the travel methods table
        """
        method = self._tables.get_travel_method(method_id)
        self._state.travel_method = method.method_id
        self._touch()

    def assign_role(self, role_id: str, name: str) -> None:
        self._state.role_assignments[role_id] = name
        self._touch()

    def clear_roles(self) -> None:
        self._state.role_assignments.clear()
        self._touch()

    # =========================================================================
    # TERRAIN AND BUDGET QUERIES
    # =========================================================================

    def get_terrain_at(self, col: int, row: int) -> TerrainType:
        return self._terrain.get_terrain(col, row)

    def get_terrain_definition_at(self, col: int, row: int) -> TerrainDefinition:
        return self._tables.get_terrain(self._terrain.get_terrain(col, row))

    def get_climate_at(self, col: int, row: int) -> Optional[ClimateType]:
        return self._terrain.get_climate(col, row)

    def get_pace_definition(self) -> PaceDefinition:
        return self._tables.get_pace(self._state.pace)

    def get_weather_definition(self) -> WeatherDefinition:
        return self._tables.get_weather(self._state.current_weather)

    def get_max_hexes_today(self) -> int:
        """Daily budget: pace hexes scaled by weather, never below 1."""
        pace = self.get_pace_definition()
        weather = self.get_weather_definition()
        return max(1, math.floor(pace.hexes_per_day * weather.travel_modifier))

    def get_movement_cost_for_hex(self, col: int, row: int) -> MovementCost:
        """
        Movement points needed to enter a hex.

        Returns:
            MovementCost with points = max(1, round(1 / modifier)), or an
            impassable cost when the terrain modifier is 0 or less
        """
        definition = self.get_terrain_definition_at(col, row)
        if definition.is_impassable:
            return MovementCost.blocked()
        points = max(1, _round_half_away_from_zero(1 / definition.travel_modifier))
        return MovementCost(points=points)

    def can_move_today(self) -> bool:
        return self._state.hexes_moved_today < self.get_max_hexes_today()

    def get_remaining_movement(self) -> int:
        return max(0, self.get_max_hexes_today() - self._state.hexes_moved_today)

    def check_move(self, col: int, row: int) -> list[str]:
        """
        List the warnings a move to this hex would raise.

        Empty when the hex is passable and affordable today.
        """
        warnings = []
        definition = self.get_terrain_definition_at(col, row)
        cost = self.get_movement_cost_for_hex(col, row)
        remaining = self.get_remaining_movement()

        if cost.impassable:
            warnings.append(
                f"{definition.name} at ({col}, {row}) is impassable without a vessel or magic"
            )
        elif cost.points > remaining:
            warnings.append(
                f"Entering {definition.name} at ({col}, {row}) costs {cost.points} "
                f"but only {remaining} movement remains today"
            )
        return warnings

    # =========================================================================
    # MOVEMENT
    # =========================================================================

    def move_to_hex(self, col: int, row: int) -> int:
        """
        Move the party into a hex and spend its movement cost.

        Never refuses. Overshooting the daily budget is allowed. Entering an
        impassable hex spends whatever movement is left today (at least 1).

        Returns:
            The movement points spent
        """
        cost = self.get_movement_cost_for_hex(col, row)
        for warning in self.check_move(col, row):
            logger.warning(warning)

        if cost.impassable:
            spent = max(1, self.get_remaining_movement())
        else:
            spent = cost.points

        self._state.hexes_moved_today += spent
        self._state.party_position = HexCoord(col, row)
        self._state.visited_hexes.append(VisitedHex(col, row, self._state.current_day))
        self._touch()

        max_hexes = self.get_max_hexes_today()
        get_run_log().log_travel(
            col=col,
            row=row,
            terrain=self.get_terrain_at(col, row).value,
            cost=spent,
            hexes_moved_today=self._state.hexes_moved_today,
            max_hexes_today=max_hexes,
        )
        logger.debug(
            f"Moved to ({col}, {row}) for {spent}; "
            f"{self._state.hexes_moved_today}/{max_hexes} today"
        )
        return spent

    def set_party_position(self, col: int, row: int) -> None:
        """
        Place the party without spending movement.

        Records a visit unless this hex is already today's latest visit.
        """
        self._state.party_position = HexCoord(col, row)
        visit = VisitedHex(col, row, self._state.current_day)
        visited = self._state.visited_hexes
        if not visited or visited[-1] != visit:
            visited.append(visit)
        self._touch()
        logger.debug(f"Placed party at ({col}, {row})")

    def end_day(self) -> int:
        """
        Advance to the next day and reset movement.

        Weather, pace, meter and exhaustion carry over.

        Returns:
            The new day number
        """
        old_day = self._state.current_day
        hexes_moved = self._state.hexes_moved_today
        self._state.current_day += 1
        self._state.hexes_moved_today = 0
        self._touch()
        get_run_log().log_day_advance(old_day, self._state.current_day, hexes_moved)
        logger.debug(f"Day {old_day} ended after {hexes_moved} movement; now day {self._state.current_day}")
        return self._state.current_day

    def set_pace(self, pace: TravelPace) -> None:
        self._state.pace = TravelPace(pace)
        self._touch()

    def set_weather(self, weather: WeatherType) -> None:
        self._state.current_weather = WeatherType(weather)
        self._touch()

    def roll_weather(self) -> WeatherType:
        """Roll 1d12 for the day's weather and apply it."""
        result = roll_weather(self._tables)
        self.set_weather(result.weather)
        logger.debug(f"Weather for day {self._state.current_day}: {result}")
        return result.weather

    # =========================================================================
    # SURVIVAL METER AND EXHAUSTION
    # =========================================================================

    def decrement_meter(self, amount: int = 1) -> int:
        meter = self._state.survival_meter
        if amount < 0:
            return meter.current
        old = meter.current
        meter.current = _clamp(meter.current - amount, 0, meter.max)
        self._meter_changed(old, meter.current)
        return meter.current

    def increment_meter(self, amount: int = 1) -> int:
        meter = self._state.survival_meter
        if amount < 0:
            return meter.current
        old = meter.current
        meter.current = _clamp(meter.current + amount, 0, meter.max)
        self._meter_changed(old, meter.current)
        return meter.current

    def reset_meter(self) -> None:
        """Refill the meter after a full rest or sanctuary."""
        meter = self._state.survival_meter
        old = meter.current
        meter.current = meter.max
        self._meter_changed(old, meter.current)

    def _meter_changed(self, old: int, new: int) -> None:
        self._touch()
        if old == new:
            return
        meter = self._state.survival_meter
        logger.debug(f"Survival meter {old} -> {new} (max {meter.max})")
        get_run_log().log_custom("survival_meter", {"old": old, "new": new, "max": meter.max})

    def is_meter_at_threshold(self) -> bool:
        meter = self._state.survival_meter
        return meter.current <= meter.threshold

    def is_meter_depleted(self) -> bool:
        return self._state.survival_meter.current <= 0

    def add_exhaustion(self, levels: int = 1) -> int:
        if levels < 0:
            return self._state.exhaustion_level
        return self._set_exhaustion(self._state.exhaustion_level + levels)

    def remove_exhaustion(self, levels: int = 1) -> int:
        if levels < 0:
            return self._state.exhaustion_level
        return self._set_exhaustion(self._state.exhaustion_level - levels)

    def _set_exhaustion(self, level: int) -> int:
        old = self._state.exhaustion_level
        self._state.exhaustion_level = _clamp(level, 0, MAX_EXHAUSTION_LEVEL)
        self._touch()
        if old != self._state.exhaustion_level:
            logger.debug(f"Exhaustion {old} -> {self._state.exhaustion_level}")
            get_run_log().log_custom(
                "exhaustion", {"old": old, "new": self._state.exhaustion_level}
            )
        return self._state.exhaustion_level

    def get_exhaustion_effect(self) -> str:
        return self._tables.get_exhaustion_effect(self._state.exhaustion_level)

    # =========================================================================
    # RATIONS
    # =========================================================================

    def consume_rations(self) -> RationsState:
        """
        Eat and drink one day's rations for the whole party.

        Each member needs 1 lb of food and 1 gallon of water (2 in extreme
        heat). A shortfall counts a day without; a full ration resets the count.

        Returns:
            The updated rations, including the days-without counters
        """
        rations = self._state.rations
        food_needed = rations.party_size * FOOD_PER_MEMBER
        per_member = (
            WATER_PER_MEMBER_EXTREME_HEAT
            if self._state.current_weather == WeatherType.EXTREME_HEAT
            else WATER_PER_MEMBER
        )
        water_needed = rations.party_size * per_member

        if rations.food_lbs >= food_needed:
            rations.food_lbs -= food_needed
            rations.days_without_food = 0
        else:
            rations.food_lbs = 0
            rations.days_without_food += 1

        if rations.water_gallons >= water_needed:
            rations.water_gallons -= water_needed
            rations.days_without_water = 0
        else:
            rations.water_gallons = 0
            rations.days_without_water += 1

        if rations.days_without_food or rations.days_without_water:
            logger.warning(
                f"Party short on supplies: {rations.days_without_food} day(s) without food, "
                f"{rations.days_without_water} day(s) without water"
            )
        self._touch()
        return rations

    def add_supplies(self, food_lbs: float = 0, water_gallons: float = 0) -> RationsState:
        """Add foraged or purchased food and water. Negative amounts are ignored."""
        rations = self._state.rations
        rations.food_lbs += max(0, food_lbs)
        rations.water_gallons += max(0, water_gallons)
        self._touch()
        return rations

    def set_party_size(self, size: int) -> None:
        self._state.rations.party_size = max(1, size)
        self._touch()

    # =========================================================================
    # TRAVEL LOG
    # =========================================================================

    def add_log_entry(self, entry: TravelLogEntry) -> TravelLogEntry:
        """
        Append an entry to the travel log, stamping the current day and timestamp.

        Returns:
            The entry as stored
        """
        stored = self._log.append(
            replace(entry, day=self._state.current_day, timestamp=utc_timestamp())
        )
        self._touch()
        return stored

    def log_hex(
        self,
        col: int,
        row: int,
        encounter_triggered: bool = False,
        notes: Optional[str] = None,
        **details: Any,
    ) -> TravelLogEntry:
        """
        Log a hex for the current day with the terrain and weather it has now.

        Args:
            col, row: Hex entered
            encounter_triggered: Whether an encounter happened here
            notes: Free-text notes
            **details: Further TravelLogEntry fields (checks, discovery_found, ...)
        """
        entry = TravelLogEntry(
            day=self._state.current_day,
            col=col,
            row=row,
            terrain=self.get_terrain_at(col, row),
            encounter_triggered=encounter_triggered,
            notes=notes,
            weather=self._state.current_weather,
            **details,
        )
        return self.add_log_entry(entry)

    def get_today_log(self) -> list[TravelLogEntry]:
        return self._log.for_day(self._state.current_day)

    def get_log_for_day(self, day: int) -> list[TravelLogEntry]:
        return self._log.for_day(day)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        return self._state.to_dict()

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        terrain: Optional[Iterable[HexTerrain | dict[str, Any]]] = None,
        climate: Optional[Iterable[HexClimate | dict[str, Any]]] = None,
        tables: Optional[RuleTables] = None,
    ) -> "HexcrawlEngine":
        """
        Restore an engine from a persisted record and the map's painted hexes.

        Raises:
            CorruptHexcrawlStateError: if the record or a painted hex is malformed
        """
        state = HexcrawlState.from_dict(data)
        try:
            terrain_index = TerrainIndex(terrain, climate)
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptHexcrawlStateError(f"bad painted hex: {e}", "terrain") from e
        return cls(state=state, terrain_index=terrain_index, tables=tables)
