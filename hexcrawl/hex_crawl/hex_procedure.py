"""
Hex exploration procedure.

Resolves what happens as the party enters one hex:
1. Exploration checks for each assigned role (navigator, forager)
2. Random encounter roll (d20, 18+ triggers)
3. Discoveries noted by the GM
4. Survival meter change: -1 per failed check, +1 for a successful forage
5. Exhaustion if the meter runs dry
6. Move the party and write the travel log entry
"""

from dataclasses import dataclass, field
import logging
from typing import Optional

from hexcrawl.data_models import DiceRoller, ExplorationCheckResult, TravelLogEntry, WeatherType
from hexcrawl.hex_crawl.hex_crawl_engine import HexcrawlEngine

logger = logging.getLogger(__name__)


# d20 result at or above which a random encounter occurs
ENCOUNTER_THRESHOLD = 18

DEFAULT_NAVIGATION_DC = 10
DEFAULT_FORAGE_DC = 15
DEFAULT_CHECK_DC = 10
FOG_NAVIGATION_PENALTY = 5
SEVERE_WEATHER_PENALTY = 2


@dataclass
class ProcedureOutcome:
    """What entering the hex cost and changed."""
    entry: TravelLogEntry
    movement_spent: int
    meter_change: int
    meter_after: int
    exhaustion_gained: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def encounter_triggered(self) -> bool:
        return self.entry.encounter_triggered


class HexProcedure:
    """
    Collects check, encounter and discovery results for one hex, then applies
    them to the engine in a single `complete()` call.
    """

    def __init__(self, engine: HexcrawlEngine, col: int, row: int):
        self.engine = engine
        self.col = col
        self.row = row
        self.checks: dict[str, ExplorationCheckResult] = {}
        self.encounter_rolled = False
        self.encounter_triggered = False
        self.encounter_roll: Optional[int] = None
        self.encounter_details: Optional[str] = None
        self.discovery_found = False
        self.discovery_details: Optional[str] = None
        self.food_foraged: float = 0
        self.manual_meter_adjustment = 0
        self.completed = False

    # =========================================================================
    # EXPLORATION CHECKS
    # =========================================================================

    def check_dc(self, role_id: str) -> int:
        """
        DC for a role's check in this hex under today's weather.

        Navigators roll against the terrain's navigation DC, foragers against
        its forage DC. Fog adds 5 to navigation; severe or extreme weather adds
        2 to every check.
        """
        terrain = self.engine.get_terrain_definition_at(self.col, self.row)
        weather = self.engine.get_weather_definition()

        if role_id == "navigator":
            dc = terrain.navigation_dc or DEFAULT_NAVIGATION_DC
            if weather.weather_type == WeatherType.FOG:
                dc += FOG_NAVIGATION_PENALTY
        elif role_id == "forager":
            dc = terrain.forage_dc or DEFAULT_FORAGE_DC
        else:
            dc = DEFAULT_CHECK_DC

        if weather.is_severe:
            dc += SEVERE_WEATHER_PENALTY
        return dc

    def record_check(
        self,
        role_id: str,
        passed: bool,
        rolled: Optional[int] = None,
        player_name: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ExplorationCheckResult:
        """
        Record a role's check. Recording the same role again replaces it.

        The player name defaults to whoever is assigned to the role.
        """
        if player_name is None:
            player_name = self.engine.state.role_assignments.get(role_id)
        result = ExplorationCheckResult(
            role_id=role_id,
            dc=self.check_dc(role_id),
            passed=passed,
            player_name=player_name,
            rolled=rolled,
            notes=notes,
        )
        self.checks[role_id] = result
        logger.debug(f"{role_id} check vs DC {result.dc}: {'pass' if passed else 'fail'}")
        return result

    def roll_check(self, role_id: str, modifier: int = 0) -> ExplorationCheckResult:
        """Roll d20 + modifier for a role and record it against the DC."""
        notation = f"1d20+{modifier}" if modifier > 0 else f"1d20-{-modifier}" if modifier < 0 else "1d20"
        dice_result = DiceRoller.roll(notation, f"{role_id} check")
        dc = self.check_dc(role_id)
        return self.record_check(role_id, dice_result.total >= dc, rolled=dice_result.total)

    def failed_checks(self) -> int:
        return sum(1 for c in self.checks.values() if not c.passed)

    @property
    def navigation_failed(self) -> bool:
        navigator = self.checks.get("navigator")
        return navigator is not None and not navigator.passed

    @property
    def forage_succeeded(self) -> bool:
        forager = self.checks.get("forager")
        return forager is not None and forager.passed

    # =========================================================================
    # ENCOUNTERS AND DISCOVERIES
    # =========================================================================

    def roll_encounter(self) -> bool:
        """Roll d20 for a random encounter. Returns True if one is triggered."""
        dice_result = DiceRoller.roll_d20("encounter check")
        self.encounter_rolled = True
        self.encounter_roll = dice_result.total
        self.encounter_triggered = dice_result.total >= ENCOUNTER_THRESHOLD
        logger.debug(
            f"Encounter roll {dice_result.total} at ({self.col}, {self.row}): "
            f"{'encounter' if self.encounter_triggered else 'safe'}"
        )
        return self.encounter_triggered

    def force_encounter(self, triggered: bool = True, details: Optional[str] = None) -> None:
        """GM override of the encounter result."""
        self.encounter_triggered = triggered
        if details is not None:
            self.encounter_details = details

    def record_discovery(self, details: Optional[str] = None) -> None:
        self.discovery_found = True
        self.discovery_details = details or None

    def record_forage(self, food_lbs: float) -> None:
        """Pounds of food gathered by the forager."""
        self.food_foraged = max(0, food_lbs)

    def adjust_meter(self, amount: int) -> None:
        """GM adjustment to the meter change on top of the check results."""
        self.manual_meter_adjustment += amount

    def net_meter_change(self) -> int:
        return -self.failed_checks() + (1 if self.forage_succeeded else 0) + self.manual_meter_adjustment

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def complete(self, notes: str = "") -> ProcedureOutcome:
        """
        Apply the procedure: meter, exhaustion, movement, then the log entry.

        Raises:
            RuntimeError: if the procedure was already completed
        """
        if self.completed:
            raise RuntimeError(f"Procedure for ({self.col}, {self.row}) already completed")

        engine = self.engine
        move_warnings = engine.check_move(self.col, self.row)
        meter_warnings = []

        change = self.net_meter_change()
        if change < 0:
            engine.decrement_meter(-change)
        elif change > 0:
            engine.increment_meter(change)

        exhaustion_gained = 0
        if engine.is_meter_depleted():
            before = engine.state.exhaustion_level
            level = engine.add_exhaustion(1)
            exhaustion_gained = level - before
            meter_warnings.append(f"Survival meter depleted: exhaustion level {level} ({engine.get_exhaustion_effect()})")
        elif engine.is_meter_at_threshold():
            meter = engine.state.survival_meter
            meter_warnings.append(f"Survival meter at threshold ({meter.current}/{meter.max})")

        for warning in meter_warnings:
            logger.warning(warning)

        spent = engine.move_to_hex(self.col, self.row)

        if self.encounter_triggered:
            engine.state.hexes_since_encounter = 0
        else:
            engine.state.hexes_since_encounter += 1

        if self.food_foraged:
            engine.add_supplies(food_lbs=self.food_foraged)

        entry = engine.log_hex(
            self.col,
            self.row,
            encounter_triggered=self.encounter_triggered,
            notes=notes or None,
            hex_index=engine.state.hexes_moved_today,
            checks=tuple(self.checks.values()),
            encounter_rolled=self.encounter_rolled,
            encounter_details=self.encounter_details,
            discovery_found=self.discovery_found,
            discovery_details=self.discovery_details,
            navigation_failed=self.navigation_failed,
            food_foraged=self.food_foraged,
            survival_meter_change=change,
        )
        self.completed = True

        return ProcedureOutcome(
            entry=entry,
            movement_spent=spent,
            meter_change=change,
            meter_after=engine.state.survival_meter.current,
            exhaustion_gained=exhaustion_gained,
            warnings=move_warnings + meter_warnings,
        )
