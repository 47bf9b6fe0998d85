"""
Append-only travel log.

Wraps the list of entries held on HexcrawlState. Entries are only ever
appended; nothing edits or removes them once written.
"""

from typing import Any, Iterator, Optional

from hexcrawl.data_models import TravelLogEntry


class TravelLog:
    """Ordered record of the hexes the party entered."""

    def __init__(self, entries: Optional[list[TravelLogEntry]] = None):
        # Shares the list with the owning state so persistence sees every append
        self._entries: list[TravelLogEntry] = entries if entries is not None else []

    def append(self, entry: TravelLogEntry) -> TravelLogEntry:
        self._entries.append(entry)
        return entry

    def entries(self) -> tuple[TravelLogEntry, ...]:
        return tuple(self._entries)

    def for_day(self, day: int) -> list[TravelLogEntry]:
        """Entries stamped with the given day, in log order."""
        return [e for e in self._entries if e.day == day]

    def latest(self) -> Optional[TravelLogEntry]:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TravelLogEntry]:
        return iter(tuple(self._entries))

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self._entries]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> "TravelLog":
        return cls([TravelLogEntry.from_dict(item) for item in data])
