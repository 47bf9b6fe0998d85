"""
Tests for the RunLog.
"""

from hexcrawl.data_models import DiceRoller
from hexcrawl.hex_crawl.hex_crawl_engine import HexcrawlEngine
from hexcrawl.observability.run_log import (
    DayAdvanceEvent,
    EventType,
    RunLog,
    TravelEvent,
    get_run_log,
    reset_run_log,
)


class TestRunLogCapture:
    """Events recorded during travel."""

    def test_singleton(self):
        assert get_run_log() is RunLog()

    def test_travel_day_sequence(self, engine, seeded_dice):
        engine.roll_weather()
        engine.move_to_hex(5, 5)
        engine.end_day()

        log = get_run_log()
        types = [e.event_type for e in log.get_events()]
        assert types == [EventType.ROLL, EventType.TABLE_LOOKUP, EventType.TRAVEL, EventType.DAY_ADVANCE]
        assert [e.sequence_number for e in log.get_events()] == [1, 2, 3, 4]

    def test_filters(self, engine):
        engine.move_to_hex(5, 5)
        engine.end_day()
        log = get_run_log()
        assert len(log.get_events(EventType.TRAVEL)) == 1
        assert len(log.get_events(since_sequence=1)) == 1

    def test_over_budget_flag(self, engine):
        engine.move_to_hex(2, 0)
        engine.move_to_hex(2, 0)
        first, second = get_run_log().get_travel_events()
        assert not first.over_budget
        assert second.over_budget

    def test_summary(self, engine, seeded_dice):
        engine.roll_weather()
        engine.move_to_hex(5, 5)
        summary = get_run_log().get_summary()
        assert summary["seed"] == 42
        assert summary["rolls"] == 1
        assert summary["table_lookups"] == 1
        assert summary["travel"] == 1
        assert summary["day_advances"] == 0

    def test_pause_and_resume(self, engine):
        log = get_run_log()
        log.pause()
        engine.move_to_hex(5, 5)
        assert log.get_event_count() == 0
        log.resume()
        engine.move_to_hex(5, 6)
        assert log.get_event_count() == 1

    def test_subscribers(self, engine):
        received = []
        log = get_run_log()
        log.subscribe(received.append)
        try:
            engine.move_to_hex(5, 5)
        finally:
            log.unsubscribe(received.append)
        assert len(received) == 1
        assert isinstance(received[0], TravelEvent)

    def test_game_time_provider(self, engine):
        log = get_run_log()
        log.set_game_time_provider(lambda: f"Day {engine.current_day}")
        try:
            engine.end_day()
        finally:
            log.set_game_time_provider(None)
        assert log.get_day_advances()[0].game_time == "Day 2"

    def test_reset(self, engine):
        engine.move_to_hex(5, 5)
        log = reset_run_log()
        assert log.get_event_count() == 0


class TestRunLogPersistence:
    """Saving, loading and formatting."""

    def test_save_and_load(self, engine, seeded_dice, temp_save_dir):
        engine.roll_weather()
        engine.move_to_hex(1, 0)
        engine.end_day()
        path = temp_save_dir / "run_log.json"
        get_run_log().save(str(path))
        before = [e.to_dict() for e in get_run_log().get_events()]

        reset_run_log()
        loaded = RunLog.load(str(path))
        assert [e.to_dict() for e in loaded.get_events()] == before
        assert isinstance(loaded.get_events(EventType.DAY_ADVANCE)[0], DayAdvanceEvent)
        assert loaded.get_seed() == 42

    def test_roll_stream(self, seeded_dice):
        DiceRoller.roll("2d6", "test")
        stream = get_run_log().get_roll_stream()
        assert stream[0]["notation"] == "2d6"
        assert len(stream[0]["rolls"]) == 2

    def test_format_log(self, engine):
        engine.move_to_hex(1, 0)
        text = get_run_log().format_log()
        assert "=== Run Log ===" in text
        assert "TRAVEL (1,0) forest cost 2 -> 2/4" in text

    def test_format_log_filter(self, engine, seeded_dice):
        engine.roll_weather()
        engine.move_to_hex(1, 0)
        text = get_run_log().format_log(event_types=[EventType.TRAVEL])
        assert "TRAVEL" in text
        assert "ROLL" not in text

    def test_custom_events(self):
        event = get_run_log().log_custom("sanctuary", {"hex": "3,4"})
        assert event.event_type == EventType.CUSTOM
        assert event.context == {"event_name": "sanctuary", "hex": "3,4"}

    def test_engine_independent_of_log(self, terrain_index):
        get_run_log().pause()
        engine = HexcrawlEngine(terrain_index=terrain_index)
        assert engine.move_to_hex(1, 0) == 2
