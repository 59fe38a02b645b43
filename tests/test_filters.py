"""Tests for board filters."""

from __future__ import annotations

from conftest import board_events


def _ids(events):
    return [e.id for e in events]


class TestFilterEvents:

    def test_defaults_hide_system_logs(self):
        from mission_calendar.filters import filter_events

        result = filter_events(board_events())
        assert "evt-log" not in _ids(result)
        assert len(result) == 7

    def test_show_system_logs(self):
        from mission_calendar.filters import filter_events

        assert len(filter_events(board_events(), show_system_logs=True)) == 8

    def test_by_type(self):
        from mission_calendar.filters import filter_events

        assert _ids(filter_events(board_events(), types={"Goal"})) == ["evt-speed", "evt-review"]

    def test_by_priority(self):
        from mission_calendar.filters import filter_events

        assert _ids(filter_events(board_events(), priorities=["High"])) == ["evt-grill", "evt-audit"]

    def test_empty_selection(self):
        from mission_calendar.filters import filter_events

        assert filter_events(board_events(), types=()) == []

    def test_filtered_board_lays_out(self):
        from datetime import date

        from mission_calendar.filters import filter_events
        from mission_calendar.timeline import layout_timeline

        layout = layout_timeline(date(2025, 6, 1), 46, filter_events(board_events()))
        assert not layout.is_visible("evt-log")
        assert layout.is_visible("evt-grill")
