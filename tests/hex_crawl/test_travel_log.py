"""
Tests for the append-only TravelLog.
"""

from hexcrawl.data_models import TerrainType, TravelLogEntry
from hexcrawl.hex_crawl.travel_log import TravelLog


def _entry(day, col=0, row=0, terrain=TerrainType.PLAINS):
    return TravelLogEntry(day=day, col=col, row=row, terrain=terrain, timestamp="2026-01-01T00:00:00.000+00:00")


class TestTravelLog:
    """Order-preserving append and filter."""

    def test_append_preserves_order(self):
        log = TravelLog()
        entries = [_entry(1, col=i) for i in range(5)]
        for e in entries:
            log.append(e)
        assert list(log) == entries
        assert len(log) == 5

    def test_for_day(self):
        log = TravelLog([_entry(1), _entry(2, col=1), _entry(1, col=2)])
        assert [e.col for e in log.for_day(1)] == [0, 2]
        assert log.for_day(3) == []

    def test_entries_is_a_snapshot(self):
        log = TravelLog()
        log.append(_entry(1))
        snapshot = log.entries()
        log.append(_entry(1, col=1))
        assert len(snapshot) == 1
        assert isinstance(snapshot, tuple)

    def test_wraps_shared_list(self):
        backing = []
        log = TravelLog(backing)
        log.append(_entry(1))
        assert len(backing) == 1

    def test_latest(self):
        log = TravelLog()
        assert log.latest() is None
        log.append(_entry(1, col=4))
        assert log.latest().col == 4

    def test_list_round_trip(self):
        log = TravelLog([_entry(1, terrain=TerrainType.FOREST), _entry(2, col=3)])
        restored = TravelLog.from_list(log.to_list())
        assert restored.entries() == log.entries()
