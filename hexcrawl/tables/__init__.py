"""
Rule tables for the hexcrawl travel engine.

This module provides:
- Terrain, climate, weather and pace definitions
- Travel methods and exploration roles
- Exhaustion effect text
- The injectable RuleTables bundle
"""

from hexcrawl.tables.rule_tables import (
    # Definitions
    TerrainDefinition,
    ClimateDefinition,
    WeatherDefinition,
    PaceDefinition,
    TravelMethodCategory,
    TravelMethodDefinition,
    ExplorationRole,
    # Tables
    TERRAIN_DATA,
    CLIMATE_DATA,
    WEATHER_DATA,
    PACE_DATA,
    EXHAUSTION_EFFECTS,
    TRAVEL_METHODS,
    EXPLORATION_ROLES,
    # Lookup
    RuleTables,
    DEFAULT_RULE_TABLES,
    get_terrain_definition,
    get_climate_definition,
    get_weather_definition,
    get_pace_definition,
    get_exhaustion_effect_text,
    get_travel_method,
)

__all__ = [
    "TerrainDefinition",
    "ClimateDefinition",
    "WeatherDefinition",
    "PaceDefinition",
    "TravelMethodCategory",
    "TravelMethodDefinition",
    "ExplorationRole",
    "TERRAIN_DATA",
    "CLIMATE_DATA",
    "WEATHER_DATA",
    "PACE_DATA",
    "EXHAUSTION_EFFECTS",
    "TRAVEL_METHODS",
    "EXPLORATION_ROLES",
    "RuleTables",
    "DEFAULT_RULE_TABLES",
    "get_terrain_definition",
    "get_climate_definition",
    "get_weather_definition",
    "get_pace_definition",
    "get_exhaustion_effect_text",
    "get_travel_method",
]
