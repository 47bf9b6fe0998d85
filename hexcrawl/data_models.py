"""
Shared data structures for the hexcrawl travel engine.

These structures are owned by one travel session (one map) and are shared by
the engine, the hex procedure and the session store. Every structure here
round-trips through the persisted record: camelCase keys in, camelCase keys out.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
import random

from hexcrawl.observability.run_log import get_run_log


# =============================================================================
# ENUMS
# =============================================================================


class TerrainType(str, Enum):
    """Terrain kinds a hex can be painted with."""
    ROAD = "road"
    PLAINS = "plains"
    COASTAL = "coastal"
    FOREST = "forest"
    HILLS = "hills"
    JUNGLE = "jungle"
    SWAMP = "swamp"
    DESERT = "desert"
    MOUNTAINS = "mountains"
    ARCTIC = "arctic"
    UNDERDARK = "underdark"
    WATER = "water"
    RIVER = "river"
    RIVERSIDE = "riverside"
    RIVER_CROSSING = "river-crossing"
    INFERNO_RIVER = "inferno-river"
    INFERNO_RIVERSIDE = "inferno-riverside"
    INFERNO_RIVER_CROSSING = "inferno-river-crossing"


class ClimateType(str, Enum):
    """Climate zones painted over terrain. Flavour only."""
    TEMPERATE = "temperate"
    ARCTIC = "arctic"
    TROPICAL = "tropical"
    ARID = "arid"
    VOLCANIC = "volcanic"
    MARITIME = "maritime"


class WeatherType(str, Enum):
    """Weather conditions affecting the daily movement budget."""
    CLEAR = "clear"
    OVERCAST = "overcast"
    FOG = "fog"
    RAIN = "rain"
    HEAVY_RAIN = "heavy-rain"
    THUNDERSTORM = "thunderstorm"
    SNOW = "snow"
    BLIZZARD = "blizzard"
    HAIL = "hail"
    SANDSTORM = "sandstorm"
    EXTREME_HEAT = "extreme-heat"
    EXTREME_COLD = "extreme-cold"


class WeatherSeverity(str, Enum):
    """Severity tier of a weather condition."""
    CLEAR = "clear"
    LIGHT = "light"
    MODERATE = "moderate"
    SEVERE = "severe"
    EXTREME = "extreme"


class TravelPace(str, Enum):
    """Chosen travel speed category."""
    SLOW = "slow"
    NORMAL = "normal"
    FAST = "fast"


MAX_EXHAUSTION_LEVEL = 6


class CorruptHexcrawlStateError(ValueError):
    """Raised when a persisted hexcrawl record cannot be restored."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.field_name = field_name
        prefix = "Corrupt hexcrawl state"
        if field_name:
            prefix = f"{prefix} (field '{field_name}')"
        super().__init__(f"{prefix}: {message}")


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


# =============================================================================
# DICE AND RANDOMIZATION
# =============================================================================


class DiceRoller:
    """
    Centralized randomization interface.
    All dice rolls must go through this class for reproducibility and logging.
    """

    _instance = None
    _seed: Optional[int] = None
    _roll_log: list = []

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def set_seed(cls, seed: int) -> None:
        """Set random seed for reproducibility."""
        cls._seed = seed
        random.seed(seed)
        get_run_log().set_seed(seed)

    @classmethod
    def roll(cls, dice: str, reason: str = "") -> "DiceResult":
        """
        Roll dice using standard notation (e.g., '1d12', '1d20+5', '3d6-2').

        Args:
            dice: Dice notation string
            reason: Why this roll is being made (for logging)

        Returns:
            DiceResult with individual rolls and total
        """
        modifier = 0
        if '+' in dice:
            dice_part, mod_part = dice.split('+')
            modifier = int(mod_part)
        elif '-' in dice:
            dice_part, mod_part = dice.split('-')
            modifier = -int(mod_part)
        else:
            dice_part = dice

        num_dice, die_size = dice_part.lower().split('d')
        num_dice = int(num_dice) if num_dice else 1
        die_size = int(die_size)

        rolls = [random.randint(1, die_size) for _ in range(num_dice)]
        total = sum(rolls) + modifier

        result = DiceResult(
            notation=dice,
            rolls=rolls,
            modifier=modifier,
            total=total,
            reason=reason
        )

        cls._roll_log.append(result)
        get_run_log().log_roll(dice, rolls, modifier, total, reason)
        return result

    @classmethod
    def roll_d12(cls, reason: str = "") -> "DiceResult":
        """Convenience method for the d12 weather roll."""
        return cls.roll("1d12", reason)

    @classmethod
    def roll_d20(cls, reason: str = "") -> "DiceResult":
        """Convenience method for d20 checks."""
        return cls.roll("1d20", reason)

    @classmethod
    def get_roll_log(cls) -> list:
        """Get the complete roll log for the session."""
        return cls._roll_log.copy()

    @classmethod
    def clear_roll_log(cls) -> None:
        """Clear the roll log."""
        cls._roll_log = []


@dataclass
class DiceResult:
    """Result of a dice roll with full information."""
    notation: str
    rolls: list[int]
    modifier: int
    total: int
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        if self.modifier > 0:
            return f"{self.notation}: {self.rolls} + {self.modifier} = {self.total}"
        elif self.modifier < 0:
            return f"{self.notation}: {self.rolls} - {abs(self.modifier)} = {self.total}"
        return f"{self.notation}: {self.rolls} = {self.total}"


# =============================================================================
# RECORD VALIDATION HELPERS
# =============================================================================


def _require(data: Any, key: str, expected: type | tuple[type, ...], context: str = "") -> Any:
    """Fetch a required key and check its type; bools never count as ints."""
    name = f"{context}.{key}" if context else key
    if not isinstance(data, dict):
        raise CorruptHexcrawlStateError("expected an object", context or None)
    if key not in data:
        raise CorruptHexcrawlStateError("missing required key", name)
    value = data[key]
    if isinstance(value, bool) and bool not in _as_tuple(expected):
        raise CorruptHexcrawlStateError(f"expected {_type_names(expected)}, got bool", name)
    if not isinstance(value, expected):
        raise CorruptHexcrawlStateError(
            f"expected {_type_names(expected)}, got {type(value).__name__}", name
        )
    return value


def _optional(data: dict, key: str, expected: type | tuple[type, ...], default: Any, context: str = "") -> Any:
    if not isinstance(data, dict):
        raise CorruptHexcrawlStateError("expected an object", context or None)
    if data.get(key) is None:
        return default
    return _require(data, key, expected, context)


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _type_names(expected: type | tuple[type, ...]) -> str:
    return " or ".join(t.__name__ for t in _as_tuple(expected))


def _enum_value(enum_cls: type[Enum], value: str, name: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        raise CorruptHexcrawlStateError(f"unknown {enum_cls.__name__} '{value}'", name) from None


# =============================================================================
# POSITION AND VISITS
# =============================================================================


@dataclass(frozen=True)
class HexCoord:
    """A hex on the travel grid, addressed by column and row."""
    col: int
    row: int

    def to_dict(self) -> dict[str, int]:
        return {"col": self.col, "row": self.row}

    @classmethod
    def from_dict(cls, data: dict[str, Any], context: str = "partyPosition") -> "HexCoord":
        return cls(
            col=_require(data, "col", int, context),
            row=_require(data, "row", int, context),
        )


@dataclass(frozen=True)
class VisitedHex:
    """A hex the party stood in on a given day (used for path drawing)."""
    col: int
    row: int
    day: int

    def to_dict(self) -> dict[str, int]:
        return {"col": self.col, "row": self.row, "day": self.day}

    @classmethod
    def from_dict(cls, data: dict[str, Any], context: str = "visitedHexes") -> "VisitedHex":
        return cls(
            col=_require(data, "col", int, context),
            row=_require(data, "row", int, context),
            day=_require(data, "day", int, context),
        )


# =============================================================================
# SURVIVAL METER AND RATIONS
# =============================================================================


DEFAULT_METER_MAX = 8
DEFAULT_METER_THRESHOLD = 2


@dataclass
class SurvivalMeterState:
    """
    The party's wilderness endurance.

    Failed exploration checks drain it; foraging and sanctuary refill it.
    Invariant: 0 <= current <= max.
    """
    current: int = DEFAULT_METER_MAX
    max: int = DEFAULT_METER_MAX
    threshold: int = DEFAULT_METER_THRESHOLD

    def to_dict(self) -> dict[str, int]:
        return {"current": self.current, "max": self.max, "threshold": self.threshold}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SurvivalMeterState":
        context = "survivalMeter"
        meter = cls(
            current=_require(data, "current", int, context),
            max=_require(data, "max", int, context),
            threshold=_require(data, "threshold", int, context),
        )
        if meter.max < 0 or not 0 <= meter.current <= meter.max:
            raise CorruptHexcrawlStateError(
                f"current {meter.current} outside [0, {meter.max}]", context
            )
        return meter


@dataclass
class RationsState:
    """
    Food and water carried by the party.

    Each member needs 1 lb of food and 1 gallon of water per day.
    """
    food_lbs: float = 10
    water_gallons: float = 10
    party_size: int = 4
    days_without_food: int = 0
    days_without_water: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "foodLbs": self.food_lbs,
            "waterGallons": self.water_gallons,
            "partySize": self.party_size,
            "daysWithoutFood": self.days_without_food,
            "daysWithoutWater": self.days_without_water,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RationsState":
        context = "rations"
        return cls(
            food_lbs=_require(data, "foodLbs", (int, float), context),
            water_gallons=_require(data, "waterGallons", (int, float), context),
            party_size=_require(data, "partySize", int, context),
            days_without_food=_require(data, "daysWithoutFood", int, context),
            days_without_water=_require(data, "daysWithoutWater", int, context),
        )


# =============================================================================
# TRAVEL LOG ENTRIES
# =============================================================================


@dataclass(frozen=True)
class ExplorationCheckResult:
    """Outcome of one exploration role's check while entering a hex."""
    role_id: str
    dc: int
    passed: bool
    player_name: Optional[str] = None
    rolled: Optional[int] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"roleId": self.role_id, "dc": self.dc, "passed": self.passed}
        if self.player_name is not None:
            data["playerName"] = self.player_name
        if self.rolled is not None:
            data["rolled"] = self.rolled
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExplorationCheckResult":
        context = "travelLog.checks"
        return cls(
            role_id=_require(data, "roleId", str, context),
            dc=_require(data, "dc", int, context),
            passed=_require(data, "passed", bool, context),
            player_name=_optional(data, "playerName", str, None, context),
            rolled=_optional(data, "rolled", int, None, context),
            notes=_optional(data, "notes", str, None, context),
        )


@dataclass(frozen=True)
class TravelLogEntry:
    """
    One visited hex in the travel log.

    Immutable once appended. `day` is stamped when the entry is created and
    never recomputed. The timestamp is assigned by the engine on append.
    """
    day: int
    col: int
    row: int
    terrain: TerrainType
    encounter_triggered: bool = False
    notes: Optional[str] = None
    timestamp: str = ""
    hex_index: Optional[int] = None
    weather: Optional[WeatherType] = None
    checks: tuple[ExplorationCheckResult, ...] = ()
    encounter_rolled: bool = False
    encounter_details: Optional[str] = None
    discovery_found: bool = False
    discovery_details: Optional[str] = None
    navigation_failed: bool = False
    food_foraged: float = 0
    survival_meter_change: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "day": self.day,
            "col": self.col,
            "row": self.row,
            "terrain": self.terrain.value,
            "encounterTriggered": self.encounter_triggered,
            "timestamp": self.timestamp,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        if self.hex_index is not None:
            data["hexIndex"] = self.hex_index
        if self.weather is not None:
            data["weather"] = self.weather.value
        if self.checks:
            data["checks"] = [c.to_dict() for c in self.checks]
        if self.encounter_rolled:
            data["encounterRolled"] = True
        if self.encounter_details is not None:
            data["encounterDetails"] = self.encounter_details
        if self.discovery_found:
            data["discoveryFound"] = True
        if self.discovery_details is not None:
            data["discoveryDetails"] = self.discovery_details
        if self.navigation_failed:
            data["navigationFailed"] = True
        if self.food_foraged:
            data["foodForaged"] = self.food_foraged
        if self.survival_meter_change:
            data["survivalMeterChange"] = self.survival_meter_change
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TravelLogEntry":
        context = "travelLog"
        weather = _optional(data, "weather", str, None, context)
        checks = _optional(data, "checks", list, [], context)
        return cls(
            day=_require(data, "day", int, context),
            col=_require(data, "col", int, context),
            row=_require(data, "row", int, context),
            terrain=_enum_value(TerrainType, _require(data, "terrain", str, context), f"{context}.terrain"),
            encounter_triggered=_require(data, "encounterTriggered", bool, context),
            notes=_optional(data, "notes", str, None, context),
            timestamp=_require(data, "timestamp", str, context),
            hex_index=_optional(data, "hexIndex", int, None, context),
            weather=_enum_value(WeatherType, weather, f"{context}.weather") if weather is not None else None,
            checks=tuple(ExplorationCheckResult.from_dict(c) for c in checks),
            encounter_rolled=_optional(data, "encounterRolled", bool, False, context),
            encounter_details=_optional(data, "encounterDetails", str, None, context),
            discovery_found=_optional(data, "discoveryFound", bool, False, context),
            discovery_details=_optional(data, "discoveryDetails", str, None, context),
            navigation_failed=_optional(data, "navigationFailed", bool, False, context),
            food_foraged=_optional(data, "foodForaged", (int, float), 0, context),
            survival_meter_change=_optional(data, "survivalMeterChange", int, 0, context),
        )


# =============================================================================
# AGGREGATE STATE
# =============================================================================


@dataclass
class HexcrawlState:
    """
    The full travel state for one map.

    Created disabled with defaults, enabled by the settings action, mutated
    only through HexcrawlEngine during play.
    """
    current_day: int = 1
    party_position: Optional[HexCoord] = None
    hexes_moved_today: int = 0
    pace: TravelPace = TravelPace.NORMAL
    current_weather: WeatherType = WeatherType.CLEAR
    survival_meter: SurvivalMeterState = field(default_factory=SurvivalMeterState)
    exhaustion_level: int = 0
    visited_hexes: list[VisitedHex] = field(default_factory=list)
    travel_log: list[TravelLogEntry] = field(default_factory=list)
    role_assignments: dict[str, str] = field(default_factory=dict)

    # Session bookkeeping
    enabled: bool = False
    map_id: str = ""
    travel_method: str = "walking"
    rations: RationsState = field(default_factory=RationsState)
    hexes_since_encounter: int = 0
    last_modified: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted record layout."""
        return {
            "currentDay": self.current_day,
            "partyPosition": self.party_position.to_dict() if self.party_position else None,
            "hexesMovedToday": self.hexes_moved_today,
            "pace": self.pace.value,
            "currentWeather": self.current_weather.value,
            "survivalMeter": self.survival_meter.to_dict(),
            "exhaustionLevel": self.exhaustion_level,
            "visitedHexes": [v.to_dict() for v in self.visited_hexes],
            "travelLog": [e.to_dict() for e in self.travel_log],
            "roleAssignments": dict(self.role_assignments),
            "enabled": self.enabled,
            "mapId": self.map_id,
            "travelMethod": self.travel_method,
            "rations": self.rations.to_dict(),
            "hexesSinceEncounter": self.hexes_since_encounter,
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HexcrawlState":
        """
        Restore from the persisted record.

        Raises:
            CorruptHexcrawlStateError: if a required key is missing, a value has
                the wrong type or an unknown enum string, or an invariant fails.
        """
        if not isinstance(data, dict):
            raise CorruptHexcrawlStateError(f"expected an object, got {type(data).__name__}")

        current_day = _require(data, "currentDay", int)
        if current_day < 1:
            raise CorruptHexcrawlStateError(f"day {current_day} is before day 1", "currentDay")

        hexes_moved = _require(data, "hexesMovedToday", int)
        if hexes_moved < 0:
            raise CorruptHexcrawlStateError(f"negative movement {hexes_moved}", "hexesMovedToday")

        exhaustion = _require(data, "exhaustionLevel", int)
        if not 0 <= exhaustion <= MAX_EXHAUSTION_LEVEL:
            raise CorruptHexcrawlStateError(
                f"level {exhaustion} outside [0, {MAX_EXHAUSTION_LEVEL}]", "exhaustionLevel"
            )

        if "partyPosition" not in data:
            raise CorruptHexcrawlStateError("missing required key", "partyPosition")
        position = data["partyPosition"]
        if position is not None and not isinstance(position, dict):
            raise CorruptHexcrawlStateError("expected an object or null", "partyPosition")

        roles = _require(data, "roleAssignments", dict)
        for role_id, name in roles.items():
            if not isinstance(name, str):
                raise CorruptHexcrawlStateError(f"role '{role_id}' has a non-string name", "roleAssignments")

        rations = data.get("rations")

        return cls(
            current_day=current_day,
            party_position=HexCoord.from_dict(position) if position is not None else None,
            hexes_moved_today=hexes_moved,
            pace=_enum_value(TravelPace, _require(data, "pace", str), "pace"),
            current_weather=_enum_value(WeatherType, _require(data, "currentWeather", str), "currentWeather"),
            survival_meter=SurvivalMeterState.from_dict(_require(data, "survivalMeter", dict)),
            exhaustion_level=exhaustion,
            visited_hexes=[VisitedHex.from_dict(v) for v in _require(data, "visitedHexes", list)],
            travel_log=[TravelLogEntry.from_dict(e) for e in _require(data, "travelLog", list)],
            role_assignments=dict(roles),
            enabled=_optional(data, "enabled", bool, False),
            map_id=_optional(data, "mapId", str, ""),
            travel_method=_optional(data, "travelMethod", str, "walking"),
            rations=RationsState.from_dict(rations) if rations is not None else RationsState(),
            hexes_since_encounter=_optional(data, "hexesSinceEncounter", int, 0),
            last_modified=_optional(data, "lastModified", str, utc_timestamp()),
        )
