"""
Journey run log.

Every dice roll, weather table lookup, hex entered and day ended is recorded
in order with a sequence number. The log can be written to JSON and read
back, and the roll stream it holds is enough to audit a seeded journey.

The log is process-wide: use get_run_log() rather than holding a reference
across resets.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Callable, ClassVar, Optional
import json
import logging

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Kinds of run log event."""

    ROLL = "roll"
    TABLE_LOOKUP = "table_lookup"
    TRAVEL = "travel"
    DAY_ADVANCE = "day_advance"
    CUSTOM = "custom"  # meter changes, exhaustion, anything ad hoc


# =============================================================================
# EVENTS
# =============================================================================


@dataclass
class LogEvent:
    """
    One entry in the run log.

    Subclasses pin ``event_type`` and add their own fields. Serialization is
    driven by the dataclass fields so subclasses only describe themselves.
    """

    label: ClassVar[str] = "EVENT"

    event_type: EventType = EventType.CUSTOM
    timestamp: datetime = field(default_factory=datetime.now)
    sequence_number: int = 0
    game_time: Optional[str] = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, (list, dict)):
                value = value.copy()
            data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogEvent":
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            if not f.init or f.name not in data:
                continue
            kwargs[f.name] = data[f.name]
        if "timestamp" in kwargs:
            kwargs["timestamp"] = datetime.fromisoformat(kwargs["timestamp"])
        if "event_type" in kwargs:
            kwargs["event_type"] = EventType(kwargs["event_type"])
        return cls(**kwargs)

    def describe(self) -> str:
        name = self.context.get("event_name", self.event_type.value)
        details = ", ".join(f"{k}={v}" for k, v in self.context.items() if k != "event_name")
        return f"{name} {details}".strip()

    def __str__(self) -> str:
        return f"[{self.sequence_number}] {self.label} {self.describe()}"


@dataclass
class RollEvent(LogEvent):
    """A dice roll made through DiceRoller."""

    label: ClassVar[str] = "ROLL"

    event_type: EventType = field(default=EventType.ROLL, init=False)
    notation: str = ""
    rolls: list[int] = field(default_factory=list)
    modifier: int = 0
    total: int = 0
    reason: str = ""

    def describe(self) -> str:
        text = f"{self.notation}: {self.rolls}"
        if self.modifier:
            sign = "+" if self.modifier > 0 else "-"
            text += f" {sign} {abs(self.modifier)}"
        return f"{text} = {self.total} ({self.reason})"


@dataclass
class TableLookupEvent(LogEvent):
    """A rolled result looked up on a rule table."""

    label: ClassVar[str] = "TABLE"

    event_type: EventType = field(default=EventType.TABLE_LOOKUP, init=False)
    table_id: str = ""
    table_name: str = ""
    roll_total: int = 0
    result_text: str = ""

    def describe(self) -> str:
        return f"{self.table_name} [{self.roll_total}]: {self.result_text}"


@dataclass
class TravelEvent(LogEvent):
    """The party entered a hex."""

    label: ClassVar[str] = "TRAVEL"

    event_type: EventType = field(default=EventType.TRAVEL, init=False)
    col: int = 0
    row: int = 0
    terrain: str = ""
    cost: int = 0
    hexes_moved_today: int = 0
    max_hexes_today: int = 0

    @property
    def over_budget(self) -> bool:
        return self.hexes_moved_today > self.max_hexes_today

    def describe(self) -> str:
        return (
            f"({self.col},{self.row}) {self.terrain} "
            f"cost {self.cost} -> {self.hexes_moved_today}/{self.max_hexes_today}"
        )


@dataclass
class DayAdvanceEvent(LogEvent):
    """A travel day ended."""

    label: ClassVar[str] = "DAY"

    event_type: EventType = field(default=EventType.DAY_ADVANCE, init=False)
    old_day: int = 0
    new_day: int = 0
    hexes_moved: int = 0  # spent on the day that ended

    def describe(self) -> str:
        return f"{self.old_day} -> {self.new_day} ({self.hexes_moved} moved)"


_EVENT_CLASSES: dict[EventType, type[LogEvent]] = {
    EventType.ROLL: RollEvent,
    EventType.TABLE_LOOKUP: TableLookupEvent,
    EventType.TRAVEL: TravelEvent,
    EventType.DAY_ADVANCE: DayAdvanceEvent,
}


def event_from_dict(data: dict[str, Any]) -> LogEvent:
    """Rebuild an event of the right class from its serialized form."""
    event_cls = _EVENT_CLASSES.get(EventType(data["event_type"]), LogEvent)
    return event_cls.from_dict(data)


# =============================================================================
# RUN LOG
# =============================================================================


class RunLog:
    """
    Ordered record of a journey's events.

    Singleton: RunLog() always returns the same instance.
    """

    _instance: Optional["RunLog"] = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._events = []
            instance._sequence = 0
            instance._seed = None
            instance._session_start = datetime.now()
            instance._game_time_provider = None
            instance._subscribers = []
            instance._paused = False
            cls._instance = instance
        return cls._instance

    # ----- session -----

    def reset(self) -> None:
        """Drop all events and restart numbering. Seed and subscribers are kept."""
        self._events: list[LogEvent] = []
        self._sequence = 0
        self._session_start = datetime.now()
        logger.info("RunLog reset")

    def set_seed(self, seed: int) -> None:
        self._seed = seed
        logger.info(f"RunLog seed set: {seed}")

    def get_seed(self) -> Optional[int]:
        return self._seed

    def set_game_time_provider(self, provider: Optional[Callable[[], str]]) -> None:
        """Set a callback stamping each event with the game time, e.g. "Day 3"."""
        self._game_time_provider = provider

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def is_paused(self) -> bool:
        return self._paused

    def subscribe(self, callback: Callable[[LogEvent], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[LogEvent], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    # ----- recording -----

    def _record(self, event: LogEvent) -> LogEvent:
        if self._paused:
            return event

        self._sequence += 1
        event.sequence_number = self._sequence
        if self._game_time_provider is not None:
            try:
                event.game_time = self._game_time_provider()
            except Exception as e:
                logger.debug(f"Game time provider failed: {e}")
        self._events.append(event)

        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception as e:
                logger.warning(f"RunLog subscriber failed on event {event.sequence_number}: {e}")
        return event

    def log_roll(
        self,
        notation: str,
        rolls: list[int],
        modifier: int,
        total: int,
        reason: str = "",
    ) -> RollEvent:
        return self._record(
            RollEvent(notation=notation, rolls=list(rolls), modifier=modifier, total=total, reason=reason)
        )

    def log_table_lookup(
        self, table_id: str, table_name: str, roll_total: int, result_text: str
    ) -> TableLookupEvent:
        return self._record(
            TableLookupEvent(
                table_id=table_id, table_name=table_name, roll_total=roll_total, result_text=result_text
            )
        )

    def log_travel(
        self,
        col: int,
        row: int,
        terrain: str,
        cost: int,
        hexes_moved_today: int,
        max_hexes_today: int,
    ) -> TravelEvent:
        """Record the party entering a hex, with the day's movement after the move."""
        return self._record(
            TravelEvent(
                col=col,
                row=row,
                terrain=terrain,
                cost=cost,
                hexes_moved_today=hexes_moved_today,
                max_hexes_today=max_hexes_today,
            )
        )

    def log_day_advance(self, old_day: int, new_day: int, hexes_moved: int) -> DayAdvanceEvent:
        return self._record(DayAdvanceEvent(old_day=old_day, new_day=new_day, hexes_moved=hexes_moved))

    def log_custom(self, event_name: str, details: dict[str, Any]) -> LogEvent:
        return self._record(LogEvent(context={"event_name": event_name, **details}))

    # ----- queries -----

    def get_events(
        self,
        event_type: Optional[EventType] = None,
        since_sequence: int = 0,
    ) -> list[LogEvent]:
        """
        Get recorded events in order.

        Args:
            event_type: Only events of this type (None for all)
            since_sequence: Only events numbered after this
        """
        return [
            e
            for e in self._events
            if e.sequence_number > since_sequence and (event_type is None or e.event_type == event_type)
        ]

    def _of_class(self, event_cls: type) -> list:
        return [e for e in self._events if isinstance(e, event_cls)]

    def get_rolls(self) -> list[RollEvent]:
        return self._of_class(RollEvent)

    def get_table_lookups(self) -> list[TableLookupEvent]:
        return self._of_class(TableLookupEvent)

    def get_travel_events(self) -> list[TravelEvent]:
        return self._of_class(TravelEvent)

    def get_day_advances(self) -> list[DayAdvanceEvent]:
        return self._of_class(DayAdvanceEvent)

    def get_roll_stream(self) -> list[dict[str, Any]]:
        """Each roll as {notation, rolls, modifier, total, reason}, in order."""
        keys = ("notation", "rolls", "modifier", "total", "reason")
        return [{k: getattr(e, k) for k in keys} for e in self.get_rolls()]

    def get_event_count(self) -> int:
        return len(self._events)

    def get_summary(self) -> dict[str, Any]:
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "total_events": len(self._events),
            "rolls": len(self.get_rolls()),
            "table_lookups": len(self.get_table_lookups()),
            "travel": len(self.get_travel_events()),
            "day_advances": len(self.get_day_advances()),
            "last_sequence": self._sequence,
        }

    # ----- persistence -----

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_start": self._session_start.isoformat(),
            "seed": self._seed,
            "sequence": self._sequence,
            "events": [e.to_dict() for e in self._events],
        }

    def save(self, filepath: str) -> None:
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)
        logger.info(f"RunLog saved to {filepath} ({len(self._events)} events)")

    @classmethod
    def load(cls, filepath: str) -> "RunLog":
        """Replace the global log's contents with a saved log."""
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)

        log = get_run_log()
        log.reset()
        log._session_start = datetime.fromisoformat(data["session_start"])
        log._seed = data.get("seed")
        log._sequence = data.get("sequence", 0)
        log._events = [event_from_dict(event_data) for event_data in data.get("events", [])]

        logger.info(f"RunLog loaded from {filepath}: {len(log._events)} events")
        return log

    def format_log(
        self,
        event_types: Optional[list[EventType]] = None,
        max_events: Optional[int] = None,
    ) -> str:
        """Render the log as text, one event per line under a short header."""
        events = [e for e in self._events if not event_types or e.event_type in event_types]
        if max_events:
            events = events[-max_events:]

        seed = self._seed if self._seed is not None else "not set"
        header = [
            "=== Run Log ===",
            f"Session: {self._session_start.isoformat()}",
            f"Seed: {seed}",
            f"Total Events: {len(self._events)}",
            "",
        ]
        return "\n".join(header + [str(e) for e in events])


def get_run_log() -> RunLog:
    """Get the global RunLog instance."""
    return RunLog()


def reset_run_log() -> RunLog:
    """Reset and return the global RunLog instance."""
    log = get_run_log()
    log.reset()
    return log
