"""
Sparse per-hex terrain and climate storage.

Hexes are addressed by (col, row). Only painted hexes are stored; an
unpainted hex reads as plains and has no climate.
"""

from dataclasses import dataclass
import logging
from typing import Any, Iterable, Optional

from hexcrawl.data_models import ClimateType, TerrainType

logger = logging.getLogger(__name__)

DEFAULT_TERRAIN = TerrainType.PLAINS


@dataclass(frozen=True)
class HexTerrain:
    """A painted terrain assignment."""
    col: int
    row: int
    terrain: TerrainType
    custom_description: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"col": self.col, "row": self.row, "terrain": self.terrain.value}
        if self.custom_description:
            data["customDescription"] = self.custom_description
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HexTerrain":
        return cls(
            col=int(data["col"]),
            row=int(data["row"]),
            terrain=TerrainType(data["terrain"]),
            custom_description=data.get("customDescription") or None,
        )


@dataclass(frozen=True)
class HexClimate:
    """A painted climate assignment."""
    col: int
    row: int
    climate: ClimateType

    def to_dict(self) -> dict[str, Any]:
        return {"col": self.col, "row": self.row, "climate": self.climate.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HexClimate":
        return cls(
            col=int(data["col"]),
            row=int(data["row"]),
            climate=ClimateType(data["climate"]),
        )


class TerrainIndex:
    """
    Terrain and climate painted onto the hex grid.

    Lookups are O(1) dict reads keyed by (col, row).
    """

    def __init__(
        self,
        terrain: Optional[Iterable[HexTerrain | dict[str, Any]]] = None,
        climate: Optional[Iterable[HexClimate | dict[str, Any]]] = None,
    ):
        self._terrain: dict[tuple[int, int], TerrainType] = {}
        self._climate: dict[tuple[int, int], ClimateType] = {}
        self._descriptions: dict[tuple[int, int], str] = {}
        if terrain is not None:
            self.load_terrain_data(terrain)
        if climate is not None:
            self.load_climate_data(climate)

    # =========================================================================
    # TERRAIN
    # =========================================================================

    def set_terrain(self, col: int, row: int, terrain: TerrainType) -> None:
        self._terrain[(col, row)] = TerrainType(terrain)

    def clear_terrain(self, col: int, row: int) -> None:
        """Erase painted terrain; the hex reads as plains again."""
        self._terrain.pop((col, row), None)
        self._descriptions.pop((col, row), None)

    def get_terrain(self, col: int, row: int) -> TerrainType:
        """Terrain at a hex, plains if nothing was painted there."""
        return self._terrain.get((col, row), DEFAULT_TERRAIN)

    def has_terrain(self, col: int, row: int) -> bool:
        return (col, row) in self._terrain

    def set_custom_description(self, col: int, row: int, description: Optional[str]) -> None:
        """Attach GM read-aloud text to a hex. Empty text removes it."""
        if description:
            self._descriptions[(col, row)] = description
        else:
            self._descriptions.pop((col, row), None)

    def get_custom_description(self, col: int, row: int) -> Optional[str]:
        return self._descriptions.get((col, row))

    def load_terrain_data(self, assignments: Iterable[HexTerrain | dict[str, Any]]) -> None:
        """
        Replace all terrain with the given assignments.

        Args:
            assignments: HexTerrain records or {col,row,terrain,customDescription?} dicts

        Raises:
            ValueError: if an assignment names an unknown terrain kind
        """
        terrain: dict[tuple[int, int], TerrainType] = {}
        descriptions: dict[tuple[int, int], str] = {}
        for item in assignments:
            hex_terrain = item if isinstance(item, HexTerrain) else HexTerrain.from_dict(item)
            key = (hex_terrain.col, hex_terrain.row)
            terrain[key] = hex_terrain.terrain
            if hex_terrain.custom_description:
                descriptions[key] = hex_terrain.custom_description
        self._terrain = terrain
        self._descriptions = descriptions
        logger.debug(f"Loaded terrain for {len(terrain)} hexes")

    def terrain_assignments(self) -> list[HexTerrain]:
        return [
            HexTerrain(col, row, terrain, self._descriptions.get((col, row)))
            for (col, row), terrain in self._terrain.items()
        ]

    # =========================================================================
    # CLIMATE
    # =========================================================================

    def set_climate(self, col: int, row: int, climate: ClimateType) -> None:
        self._climate[(col, row)] = ClimateType(climate)

    def clear_climate(self, col: int, row: int) -> None:
        self._climate.pop((col, row), None)

    def get_climate(self, col: int, row: int) -> Optional[ClimateType]:
        """Climate at a hex, None if unpainted."""
        return self._climate.get((col, row))

    def load_climate_data(self, assignments: Iterable[HexClimate | dict[str, Any]]) -> None:
        """Replace all climate with the given assignments."""
        climate: dict[tuple[int, int], ClimateType] = {}
        for item in assignments:
            hex_climate = item if isinstance(item, HexClimate) else HexClimate.from_dict(item)
            climate[(hex_climate.col, hex_climate.row)] = hex_climate.climate
        self._climate = climate
        logger.debug(f"Loaded climate for {len(climate)} hexes")

    def climate_assignments(self) -> list[HexClimate]:
        return [HexClimate(col, row, climate) for (col, row), climate in self._climate.items()]

    def __len__(self) -> int:
        return len(self._terrain)
