"""
Rule tables for hexcrawl travel.

Static, read-only definitions for terrain, climate, weather, pace, travel
methods, exploration roles and exhaustion effects. Each table is keyed by its
kind enum and covers every member; a missing entry is a programming error and
raises KeyError rather than falling back to a default.

Terrain modifiers follow the 6-mile-hex guidance: normal terrain moves at full
speed, difficult terrain at half speed, very difficult terrain at a third.
A modifier of 0 marks terrain impassable without a vessel or magic.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from hexcrawl.data_models import (
    ClimateType,
    MAX_EXHAUSTION_LEVEL,
    TerrainType,
    TravelPace,
    WeatherSeverity,
    WeatherType,
)


# =============================================================================
# DEFINITIONS
# =============================================================================


@dataclass(frozen=True)
class TerrainDefinition:
    """Travel data for one terrain kind."""
    terrain_type: TerrainType
    name: str
    travel_modifier: float  # 1.0 = normal speed, 0.5 = half speed, <= 0 impassable
    difficult_terrain: bool
    forage_dc: int  # Survival DC to forage
    navigation_dc: int  # Survival DC to avoid getting lost
    encounter_dc: int  # d20 >= DC triggers a random encounter
    description: str = ""

    @property
    def is_impassable(self) -> bool:
        return self.travel_modifier <= 0


@dataclass(frozen=True)
class ClimateDefinition:
    """Climate zone. Affects descriptions only, never movement."""
    climate_type: ClimateType
    name: str
    description: str = ""


@dataclass(frozen=True)
class WeatherDefinition:
    """A weather condition and its effect on the day's movement budget."""
    weather_type: WeatherType
    severity: WeatherSeverity
    name: str
    travel_modifier: float  # Multiplies the daily budget
    visibility: str
    mechanical_effect: str

    @property
    def is_severe(self) -> bool:
        return self.severity in (WeatherSeverity.SEVERE, WeatherSeverity.EXTREME)


@dataclass(frozen=True)
class PaceDefinition:
    """Travel pace and its base daily hex budget."""
    pace: TravelPace
    name: str
    hexes_per_day: int
    stealth_possible: bool
    perception_penalty: bool  # -5 passive Perception
    description: str = ""


class TravelMethodCategory(str, Enum):
    LAND = "land"
    WATER = "water"
    AIR = "air"
    MAGIC = "magic"


@dataclass(frozen=True)
class TravelMethodDefinition:
    """A means of travel. Informational; the pace table sets the budget."""
    method_id: str
    name: str
    category: TravelMethodCategory
    miles_per_day: int
    hexes_per_day: int  # miles_per_day / 6, rounded
    description: str = ""


@dataclass(frozen=True)
class ExplorationRole:
    """A job a player takes while the party enters a hex."""
    role_id: str
    name: str
    skill: str
    ability: str
    description: str = ""


# =============================================================================
# TABLES
# =============================================================================


def _terrain(
    terrain_type: TerrainType,
    name: str,
    travel_modifier: float,
    difficult: bool,
    forage_dc: int,
    navigation_dc: int,
    encounter_dc: int,
    description: str,
) -> tuple[TerrainType, TerrainDefinition]:
    return terrain_type, TerrainDefinition(
        terrain_type, name, travel_modifier, difficult, forage_dc, navigation_dc, encounter_dc, description
    )


T = TerrainType

TERRAIN_DATA: Mapping[TerrainType, TerrainDefinition] = MappingProxyType(dict([
    _terrain(T.ROAD, "Road", 1.25, False, 20, 0, 20, "Maintained path or trade route, fast and safe travel"),
    _terrain(T.PLAINS, "Plains", 1.0, False, 15, 10, 18, "Open grasslands, meadows, and prairies"),
    _terrain(T.COASTAL, "Coastal", 1.0, False, 10, 5, 18, "Shorelines, beaches, and tidal flats"),
    _terrain(T.FOREST, "Forest", 0.5, True, 10, 15, 16, "Dense woodlands and thick canopy"),
    _terrain(T.HILLS, "Hills", 0.5, True, 15, 10, 17, "Rolling highlands and rocky outcrops"),
    _terrain(T.JUNGLE, "Jungle", 0.5, True, 10, 15, 14, "Tropical jungle with extreme undergrowth"),
    _terrain(T.SWAMP, "Swamp", 0.5, True, 10, 15, 15, "Marshes, bogs, and wetlands"),
    _terrain(T.DESERT, "Desert", 0.5, True, 20, 10, 17, "Arid wastelands and sand dunes"),
    _terrain(T.MOUNTAINS, "Mountains", 0.33, True, 20, 15, 16, "Steep peaks and alpine passes"),
    _terrain(T.ARCTIC, "Arctic", 0.5, True, 20, 10, 17, "Frozen tundra, glaciers, and icy wastes"),
    _terrain(T.UNDERDARK, "Underdark", 0.5, True, 20, 20, 12, "Subterranean tunnels and caverns"),
    _terrain(T.WATER, "Water", 0.0, False, 15, 15, 18, "Open water, requires a vessel to cross"),
    _terrain(T.RIVER, "River", 0.5, True, 10, 10, 17, "Flowing river; may require fording, swimming, or a boat"),
    _terrain(T.RIVERSIDE, "Riverside", 0.75, False, 10, 5, 17, "Walking along the riverbank"),
    _terrain(T.RIVER_CROSSING, "River Crossing", 1.0, False, 10, 5, 18, "A bridge, ford, or ferry over the river"),
    _terrain(T.INFERNO_RIVER, "Inferno River", 0.0, True, 25, 15, 12,
             "River of molten lava, impassable without magic or fire immunity"),
    _terrain(T.INFERNO_RIVERSIDE, "Inferno Riverside", 0.5, True, 20, 10, 14,
             "Alongside a lava river; intense heat but passable"),
    _terrain(T.INFERNO_RIVER_CROSSING, "Inferno River Crossing", 0.75, True, 22, 10, 13,
             "Enchanted bridge or cooled obsidian path over the lava flow"),
]))

CLIMATE_DATA: Mapping[ClimateType, ClimateDefinition] = MappingProxyType({
    ClimateType.TEMPERATE: ClimateDefinition(
        ClimateType.TEMPERATE, "Temperate", "Mild seasons, deciduous forests, rolling farmlands"
    ),
    ClimateType.ARCTIC: ClimateDefinition(
        ClimateType.ARCTIC, "Arctic", "Frozen tundra, permafrost, howling winds"
    ),
    ClimateType.TROPICAL: ClimateDefinition(
        ClimateType.TROPICAL, "Tropical", "Hot, humid jungles, monsoon rains, dense canopy"
    ),
    ClimateType.ARID: ClimateDefinition(
        ClimateType.ARID, "Arid", "Scorching deserts, sandstorms, oases"
    ),
    ClimateType.VOLCANIC: ClimateDefinition(
        ClimateType.VOLCANIC, "Volcanic", "Ash-choked wastelands, lava flows, geothermal vents"
    ),
    ClimateType.MARITIME: ClimateDefinition(
        ClimateType.MARITIME, "Maritime", "Fog-shrouded coasts, salt marshes, briny air"
    ),
})

W = WeatherType
S = WeatherSeverity

WEATHER_DATA: Mapping[WeatherType, WeatherDefinition] = MappingProxyType({
    W.CLEAR: WeatherDefinition(W.CLEAR, S.CLEAR, "Clear Skies", 1.0, "None", "No effects"),
    W.OVERCAST: WeatherDefinition(W.OVERCAST, S.LIGHT, "Overcast", 1.0, "Slightly reduced", "No effects"),
    W.FOG: WeatherDefinition(
        W.FOG, S.MODERATE, "Dense Fog", 0.75, "Heavily obscured beyond 30 ft",
        "Disadvantage on Perception (sight). Navigation DC +5",
    ),
    W.RAIN: WeatherDefinition(
        W.RAIN, S.LIGHT, "Rain", 0.75, "Lightly obscured", "Disadvantage on Perception (hearing)"
    ),
    W.HEAVY_RAIN: WeatherDefinition(
        W.HEAVY_RAIN, S.MODERATE, "Heavy Rain", 0.75, "Lightly obscured",
        "Disadvantage on Perception. Open flames extinguished",
    ),
    W.THUNDERSTORM: WeatherDefinition(
        W.THUNDERSTORM, S.SEVERE, "Thunderstorm", 0.5, "Heavily obscured",
        "Disadvantage on Perception. Navigation DC +5. Risk of lightning",
    ),
    W.SNOW: WeatherDefinition(
        W.SNOW, S.MODERATE, "Snowfall", 0.75, "Lightly obscured",
        "Terrain becomes difficult. Disadvantage on tracking",
    ),
    W.BLIZZARD: WeatherDefinition(
        W.BLIZZARD, S.EXTREME, "Blizzard", 0.25, "Heavily obscured beyond 10 ft",
        "Terrain very difficult. CON save DC 10/hr or 1 exhaustion",
    ),
    W.HAIL: WeatherDefinition(
        W.HAIL, S.SEVERE, "Hailstorm", 0.5, "Lightly obscured",
        "1d4 bludgeoning/hr without cover. Terrain becomes difficult",
    ),
    W.SANDSTORM: WeatherDefinition(
        W.SANDSTORM, S.SEVERE, "Sandstorm", 0.25, "Heavily obscured beyond 10 ft",
        "1d4 slashing/hr without cover. CON save DC 10 or blinded",
    ),
    W.EXTREME_HEAT: WeatherDefinition(
        W.EXTREME_HEAT, S.SEVERE, "Extreme Heat", 0.75, "Shimmer/mirage",
        "CON save DC 10/hr or 1 exhaustion. Water consumption doubled",
    ),
    W.EXTREME_COLD: WeatherDefinition(
        W.EXTREME_COLD, S.SEVERE, "Extreme Cold", 0.75, "None",
        "CON save DC 10/hr or 1 exhaustion. Cold resistance negates",
    ),
})

PACE_DATA: Mapping[TravelPace, PaceDefinition] = MappingProxyType({
    TravelPace.SLOW: PaceDefinition(TravelPace.SLOW, "Slow Pace", 3, True, False, "Able to use stealth"),
    TravelPace.NORMAL: PaceDefinition(TravelPace.NORMAL, "Normal Pace", 4, False, False, "Standard travel"),
    TravelPace.FAST: PaceDefinition(TravelPace.FAST, "Fast Pace", 5, False, True, "-5 passive Perception"),
})

# Rules text per exhaustion level (0 = no effect, 6 = death)
EXHAUSTION_EFFECTS: Mapping[int, str] = MappingProxyType({
    0: "None",
    1: "Disadvantage on ability checks",
    2: "Speed halved",
    3: "Disadvantage on attacks and saves",
    4: "HP maximum halved",
    5: "Speed reduced to 0",
    6: "Death",
})

LAND = TravelMethodCategory.LAND
WATER = TravelMethodCategory.WATER
AIR = TravelMethodCategory.AIR
MAGIC = TravelMethodCategory.MAGIC

TRAVEL_METHODS: Mapping[str, TravelMethodDefinition] = MappingProxyType({m.method_id: m for m in [
    TravelMethodDefinition("walking", "Walking", LAND, 24, 4, "On foot, standard travel"),
    TravelMethodDefinition("horse-riding", "Horse (Riding)", LAND, 48, 8, "Mounted on a riding horse"),
    TravelMethodDefinition("horse-draft", "Horse (Draft)", LAND, 40, 7, "Mounted on a draft horse"),
    TravelMethodDefinition("pony", "Pony", LAND, 32, 5, "Mounted on a pony"),
    TravelMethodDefinition("camel", "Camel", LAND, 40, 7, "Mounted on a camel"),
    TravelMethodDefinition("elephant", "Elephant", LAND, 32, 5, "Riding an elephant"),
    TravelMethodDefinition("cart", "Cart / Wagon", LAND, 16, 3, "Horse-drawn cart or wagon"),
    TravelMethodDefinition("carriage", "Carriage", LAND, 32, 5, "Horse-drawn carriage"),
    TravelMethodDefinition("rowboat", "Rowboat", WATER, 15, 3, "Small rowing boat"),
    TravelMethodDefinition("keelboat", "Keelboat", WATER, 12, 2, "River keelboat"),
    TravelMethodDefinition("longship", "Longship", WATER, 36, 6, "Longship under oar and sail"),
    TravelMethodDefinition("sailing-ship", "Sailing Ship", WATER, 48, 8, "Ocean-going sailing vessel"),
    TravelMethodDefinition("galley", "Galley", WATER, 60, 10, "Large oar-powered warship"),
    TravelMethodDefinition("warship", "Warship", WATER, 30, 5, "Military sailing vessel"),
    TravelMethodDefinition("griffon", "Griffon", AIR, 64, 11, "Flying griffon mount"),
    TravelMethodDefinition("hippogriff", "Hippogriff", AIR, 64, 11, "Flying hippogriff mount"),
    TravelMethodDefinition("pegasus", "Pegasus", AIR, 72, 12, "Winged horse"),
    TravelMethodDefinition("wyvern", "Wyvern", AIR, 64, 11, "Wyvern mount"),
    TravelMethodDefinition("giant-eagle", "Giant Eagle", AIR, 64, 11, "Giant eagle mount"),
    TravelMethodDefinition("dragon", "Dragon", AIR, 80, 13, "Dragon mount"),
    TravelMethodDefinition("broom-of-flying", "Broom of Flying", MAGIC, 72, 12, "Magical flying broom"),
    TravelMethodDefinition("carpet-of-flying", "Carpet of Flying", MAGIC, 64, 11, "Magical flying carpet"),
    TravelMethodDefinition("phantom-steed", "Phantom Steed", MAGIC, 104, 17, "Phantom horse (3rd-level spell)"),
]})

EXPLORATION_ROLES: Mapping[str, ExplorationRole] = MappingProxyType({
    "navigator": ExplorationRole(
        "navigator", "Navigator", "Survival", "WIS", "Avoid getting lost; check vs terrain navigation DC"
    ),
    "forager": ExplorationRole(
        "forager", "Forager", "Survival", "WIS", "Find food and water; 1d6 + WIS mod lbs on success"
    ),
})


# =============================================================================
# LOOKUP
# =============================================================================


@dataclass(frozen=True)
class RuleTables:
    """
    Bundle of the rule tables used by one engine.

    The module-level tables are the defaults; tests and house rules can build
    a RuleTables with replacement mappings and hand it to the engine.
    """
    terrain: Mapping[TerrainType, TerrainDefinition] = field(default_factory=lambda: TERRAIN_DATA)
    climate: Mapping[ClimateType, ClimateDefinition] = field(default_factory=lambda: CLIMATE_DATA)
    weather: Mapping[WeatherType, WeatherDefinition] = field(default_factory=lambda: WEATHER_DATA)
    pace: Mapping[TravelPace, PaceDefinition] = field(default_factory=lambda: PACE_DATA)
    exhaustion_effects: Mapping[int, str] = field(default_factory=lambda: EXHAUSTION_EFFECTS)
    travel_methods: Mapping[str, TravelMethodDefinition] = field(default_factory=lambda: TRAVEL_METHODS)
    exploration_roles: Mapping[str, ExplorationRole] = field(default_factory=lambda: EXPLORATION_ROLES)

    def get_terrain(self, terrain: TerrainType) -> TerrainDefinition:
        return _lookup(self.terrain, terrain, "terrain")

    def get_climate(self, climate: ClimateType) -> ClimateDefinition:
        return _lookup(self.climate, climate, "climate")

    def get_weather(self, weather: WeatherType) -> WeatherDefinition:
        return _lookup(self.weather, weather, "weather")

    def get_pace(self, pace: TravelPace) -> PaceDefinition:
        return _lookup(self.pace, pace, "pace")

    def get_exhaustion_effect(self, level: int) -> str:
        if not 0 <= level <= MAX_EXHAUSTION_LEVEL:
            raise KeyError(f"Exhaustion level {level} outside [0, {MAX_EXHAUSTION_LEVEL}]")
        return _lookup(self.exhaustion_effects, level, "exhaustion level")

    def get_travel_method(self, method_id: str) -> TravelMethodDefinition:
        return _lookup(self.travel_methods, method_id, "travel method")

    def get_exploration_role(self, role_id: str) -> Optional[ExplorationRole]:
        """Roles are open-ended (GMs add their own); unknown ids return None."""
        return self.exploration_roles.get(role_id)

    def weather_or_clear(self, value: str) -> WeatherDefinition:
        """
        Resolve a raw weather string, falling back to clear skies.

        For callers holding free-form input; persisted state rejects unknown
        weather instead.
        """
        try:
            return self.get_weather(WeatherType(value))
        except ValueError:
            return self.get_weather(WeatherType.CLEAR)


def _lookup(table: Mapping, key, table_name: str):
    try:
        return table[key]
    except KeyError:
        raise KeyError(f"No {table_name} definition for {key!r}") from None


DEFAULT_RULE_TABLES = RuleTables()


def get_terrain_definition(terrain: TerrainType) -> TerrainDefinition:
    """Get the default terrain definition for a terrain kind."""
    return DEFAULT_RULE_TABLES.get_terrain(terrain)


def get_climate_definition(climate: ClimateType) -> ClimateDefinition:
    return DEFAULT_RULE_TABLES.get_climate(climate)


def get_weather_definition(weather: WeatherType) -> WeatherDefinition:
    return DEFAULT_RULE_TABLES.get_weather(weather)


def get_pace_definition(pace: TravelPace) -> PaceDefinition:
    return DEFAULT_RULE_TABLES.get_pace(pace)


def get_exhaustion_effect_text(level: int) -> str:
    return DEFAULT_RULE_TABLES.get_exhaustion_effect(level)


def get_travel_method(method_id: str) -> TravelMethodDefinition:
    return DEFAULT_RULE_TABLES.get_travel_method(method_id)
