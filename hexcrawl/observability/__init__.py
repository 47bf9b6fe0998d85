"""
Observability for the hexcrawl travel engine.

Provides an ordered log of rolls, table lookups, hex moves and day advances
for auditing a journey and replaying its roll stream.
"""

from hexcrawl.observability.run_log import (
    RunLog,
    LogEvent,
    EventType,
    RollEvent,
    TableLookupEvent,
    TravelEvent,
    DayAdvanceEvent,
    get_run_log,
    reset_run_log,
)

__all__ = [
    "RunLog",
    "LogEvent",
    "EventType",
    "RollEvent",
    "TableLookupEvent",
    "TravelEvent",
    "DayAdvanceEvent",
    "get_run_log",
    "reset_run_log",
]
