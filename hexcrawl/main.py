"""
Hexcrawl Travel - Main Entry Point

Command-line front end for the travel engine. Each invocation loads the
travel session for one map from the save directory, applies a single command
and saves the session back.

Usage:
    python -m hexcrawl.main --map-id coast status
    python -m hexcrawl.main --map-id coast move 3 4
"""

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hexcrawl.data_models import (
    DEFAULT_METER_MAX,
    DEFAULT_METER_THRESHOLD,
    DiceRoller,
    TerrainType,
    TravelPace,
    WeatherType,
)
from hexcrawl.game_state.session_manager import TravelSession, TravelSessionManager
from hexcrawl.hex_crawl.hex_crawl_engine import (
    HexcrawlEngine,
    METER_MAX_RANGE,
    METER_THRESHOLD_RANGE,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class TravelConfig:
    """Configuration for a travel session."""

    save_dir: Path = field(default_factory=lambda: Path("saves"))
    map_id: str = "default"
    seed: Optional[int] = None

    # Survival meter settings
    meter_max: int = DEFAULT_METER_MAX
    meter_threshold: int = DEFAULT_METER_THRESHOLD

    # Runtime options
    verbose: bool = False

    def __post_init__(self):
        """Ensure paths are Path objects and meter settings are in range."""
        if isinstance(self.save_dir, str):
            self.save_dir = Path(self.save_dir)
        self.meter_max = max(METER_MAX_RANGE[0], min(METER_MAX_RANGE[1], self.meter_max))
        self.meter_threshold = max(
            METER_THRESHOLD_RANGE[0], min(METER_THRESHOLD_RANGE[1], self.meter_threshold)
        )

    @property
    def save_filename(self) -> str:
        return f"{self.map_id}.json"


# =============================================================================
# SESSION HANDLING
# =============================================================================


def open_session(config: TravelConfig, manager: TravelSessionManager) -> TravelSession:
    """Load the map's saved session, or start an enabled one with the configured meter."""
    save_path = config.save_dir / config.save_filename
    if save_path.exists():
        return manager.load_session(save_path)

    session = manager.new_session(config.map_id)
    engine = session.to_engine()
    engine.configure(enabled=True, meter_max=config.meter_max, meter_threshold=config.meter_threshold)
    engine.reset_meter()
    return session


def format_status(engine: HexcrawlEngine) -> str:
    """Summarize the travel state for display."""
    state = engine.state
    position = state.party_position
    pace = engine.get_pace_definition()
    weather = engine.get_weather_definition()
    meter = state.survival_meter

    lines = [
        f"Map: {state.map_id or '(unnamed)'}",
        f"Day {state.current_day}",
        f"Position: ({position.col}, {position.row})" if position else "Position: not placed",
        f"Pace: {pace.name} ({pace.hexes_per_day} hexes/day)",
        f"Weather: {weather.name} (x{weather.travel_modifier})",
        f"Movement: {state.hexes_moved_today}/{engine.get_max_hexes_today()} "
        f"({engine.get_remaining_movement()} remaining)",
        f"Survival meter: {meter.current}/{meter.max} (threshold {meter.threshold})",
        f"Exhaustion: {state.exhaustion_level} - {engine.get_exhaustion_effect()}",
    ]
    if position:
        terrain = engine.get_terrain_definition_at(position.col, position.row)
        lines.insert(3, f"Terrain: {terrain.name}")
    return "\n".join(lines)


# =============================================================================
# COMMANDS
# =============================================================================


def cmd_status(engine: HexcrawlEngine, args: argparse.Namespace) -> bool:
    print(format_status(engine))
    return False


def cmd_move(engine: HexcrawlEngine, args: argparse.Namespace) -> bool:
    warnings = engine.check_move(args.col, args.row)
    spent = engine.move_to_hex(args.col, args.row)
    for warning in warnings:
        print(f"Warning: {warning}")
    print(
        f"Moved to ({args.col}, {args.row}) for {spent} movement; "
        f"{engine.get_remaining_movement()} remaining today"
    )
    return True


def cmd_place(engine: HexcrawlEngine, args: argparse.Namespace) -> bool:
    engine.set_party_position(args.col, args.row)
    print(f"Party placed at ({args.col}, {args.row})")
    return True


def cmd_paint(engine: HexcrawlEngine, args: argparse.Namespace) -> bool:
    engine.terrain_index.set_terrain(args.col, args.row, TerrainType(args.terrain))
    print(f"Painted ({args.col}, {args.row}) as {args.terrain}")
    return True


def cmd_end_day(engine: HexcrawlEngine, args: argparse.Namespace) -> bool:
    day = engine.end_day()
    print(f"Day {day} begins")
    return True


def cmd_roll_weather(engine: HexcrawlEngine, args: argparse.Namespace) -> bool:
    engine.roll_weather()
    weather = engine.get_weather_definition()
    print(f"Weather: {weather.name} - {weather.mechanical_effect}")
    return True


def cmd_pace(engine: HexcrawlEngine, args: argparse.Namespace) -> bool:
    engine.set_pace(TravelPace(args.kind))
    print(f"Pace set to {args.kind}; {engine.get_max_hexes_today()} hexes today")
    return True


def cmd_weather(engine: HexcrawlEngine, args: argparse.Namespace) -> bool:
    engine.set_weather(WeatherType(args.kind))
    print(f"Weather set to {args.kind}; {engine.get_max_hexes_today()} hexes today")
    return True


COMMANDS = {
    "status": cmd_status,
    "move": cmd_move,
    "place": cmd_place,
    "paint": cmd_paint,
    "end-day": cmd_end_day,
    "roll-weather": cmd_roll_weather,
    "pace": cmd_pace,
    "weather": cmd_weather,
}


# =============================================================================
# COMMAND LINE
# =============================================================================


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Hexcrawl Travel - wilderness travel tracker for hex maps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m hexcrawl.main status                     # Show today's travel state
  python -m hexcrawl.main --map-id coast move 3 4    # Move the party one hex
  python -m hexcrawl.main roll-weather               # Roll the day's weather
  python -m hexcrawl.main end-day                    # Camp and start the next day
        """
    )

    parser.add_argument(
        "--save-dir",
        type=Path,
        default=Path("saves"),
        help="Directory for travel session saves (default: saves)",
    )
    parser.add_argument(
        "--map-id",
        type=str,
        default="default",
        help="Map whose travel session to use (default: default)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible rolls",
    )
    parser.add_argument(
        "--meter-max",
        type=int,
        default=DEFAULT_METER_MAX,
        help=f"Survival meter size for new sessions (default: {DEFAULT_METER_MAX})",
    )
    parser.add_argument(
        "--meter-threshold",
        type=int,
        default=DEFAULT_METER_THRESHOLD,
        help=f"Survival meter warning threshold (default: {DEFAULT_METER_THRESHOLD})",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("status", help="Show the travel state")

    for name, help_text in (
        ("move", "Move the party into a hex, spending movement"),
        ("place", "Place the party without spending movement"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("col", type=int)
        sub.add_argument("row", type=int)

    paint = subparsers.add_parser("paint", help="Paint terrain onto a hex")
    paint.add_argument("col", type=int)
    paint.add_argument("row", type=int)
    paint.add_argument("terrain", choices=[t.value for t in TerrainType])

    subparsers.add_parser("end-day", help="End the travel day")
    subparsers.add_parser("roll-weather", help="Roll 1d12 for the day's weather")

    pace = subparsers.add_parser("pace", help="Set the travel pace")
    pace.add_argument("kind", choices=[p.value for p in TravelPace])

    weather = subparsers.add_parser("weather", help="Set the weather")
    weather.add_argument("kind", choices=[w.value for w in WeatherType])

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> TravelConfig:
    """Create TravelConfig from parsed arguments."""
    return TravelConfig(
        save_dir=args.save_dir,
        map_id=args.map_id,
        seed=args.seed,
        meter_max=args.meter_max,
        meter_threshold=args.meter_threshold,
        verbose=args.verbose,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI usage."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    config = create_config_from_args(args)

    if config.seed is not None:
        DiceRoller.set_seed(config.seed)

    manager = TravelSessionManager(config.save_dir)
    session = open_session(config, manager)
    engine = session.to_engine()

    changed = COMMANDS[args.command](engine, args)
    if changed or not (config.save_dir / config.save_filename).exists():
        session.update_from_engine(engine)
        manager.save_session(session, filename=config.save_filename)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
