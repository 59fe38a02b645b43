"""Tests for timeline coordinates and visibility.

Test data loaded from: data/fixtures/scenarios/timeline.json
"""

from __future__ import annotations

from datetime import date

import pytest

from conftest import board_events, load_scenarios, make_event

_data = load_scenarios("timeline")
BOARD = _data["board"]


def _board_layout(**kwargs):
    from mission_calendar.timeline import layout_timeline

    return layout_timeline(
        date.fromisoformat(BOARD["window_start"]),
        BOARD["window_days"],
        board_events(),
        **kwargs,
    )


class TestLayoutTimeline:
    """layout_timeline() on the sample board with DESKTOP metrics."""

    def test_window_end_inclusive(self):
        layout = _board_layout()
        assert layout.window_end == date.fromisoformat(BOARD["expected_window_end"])

    @pytest.mark.parametrize("event_id", sorted(BOARD["expected_coordinates"]))
    def test_coordinates(self, event_id):
        exp = BOARD["expected_coordinates"][event_id]
        coord = _board_layout().coordinate(event_id)
        assert coord is not None
        assert (coord.x_start, coord.x_end, coord.y) == (
            exp["x_start"], exp["x_end"], exp["y"]
        )

    def test_hidden_events_have_no_coordinate(self):
        layout = _board_layout()
        for event_id in BOARD["expected_hidden"]:
            assert layout.coordinate(event_id) is None
            assert not layout.is_visible(event_id)

    def test_visible_ids_match_coordinates(self):
        layout = _board_layout()
        assert layout.visible_ids == frozenset(layout.coordinates)
        assert layout.visible_ids == frozenset(BOARD["expected_coordinates"])

    def test_source_ids(self):
        assert _board_layout().source_ids == frozenset(BOARD["expected_source_ids"])

    def test_totals(self):
        layout = _board_layout()
        assert layout.total_height == BOARD["expected_total_height"]
        assert layout.board_width == BOARD["expected_board_width"]

    def test_group_sizes(self):
        layout = _board_layout()
        sizes = {group: len(members) for group, members in layout.groups.items()}
        assert sizes == BOARD["expected_group_sizes"]
        assert list(layout.groups) == ["Training", "Goal", "Deadline", "Operation", "OneOnOne"]

    def test_empty_board(self):
        from mission_calendar.timeline import DESKTOP, TOTAL_HEIGHT_PADDING, layout_timeline

        layout = layout_timeline(date(2025, 6, 1), 46, [])
        assert layout.visible_ids == frozenset()
        assert layout.total_height == DESKTOP.grid_header_height + TOTAL_HEIGHT_PADDING

    def test_custom_group_order(self):
        """Types missing from group_order are never visible."""
        from mission_calendar.timeline import layout_timeline

        layout = layout_timeline(
            date(2025, 6, 1), 46, board_events(), group_order=("Goal", "Training")
        )
        assert list(layout.groups) == ["Goal", "Training"]
        assert layout.coordinate("evt-speed").y == 56 + 60 + 30
        assert not layout.is_visible("evt-audit")

    def test_mobile_metrics(self):
        from mission_calendar.timeline import MOBILE, layout_timeline

        events = [make_event("A", "2025-06-02", "2025-06-03")]
        layout = layout_timeline(date(2025, 6, 1), 46, events, metrics=MOBILE)
        coord = layout.coordinate("A")
        assert coord.x_start == 1 * 46 + 100
        assert coord.x_end == coord.x_start + 2 * 46 - 8
        assert coord.y == 48 + 40 + 28

    def test_event_covering_whole_window(self):
        from mission_calendar.timeline import DESKTOP, layout_timeline

        events = [make_event("big", "2025-01-01", "2025-12-31")]
        coord = layout_timeline(date(2025, 6, 1), 46, events).coordinate("big")
        assert coord.x_start == DESKTOP.sidebar_width
        assert coord.x_end == DESKTOP.sidebar_width + 46 * DESKTOP.day_width - DESKTOP.card_margin

    @pytest.mark.parametrize(
        "start, end, visible",
        [
            ("2025-05-31", "2025-05-31", False),
            ("2025-05-31", "2025-06-01", True),
            ("2025-07-16", "2025-07-16", True),
            ("2025-07-17", "2025-07-20", False),
        ],
    )
    def test_window_boundaries(self, start, end, visible):
        from mission_calendar.timeline import layout_timeline

        layout = layout_timeline(date(2025, 6, 1), 46, [make_event("E", start, end)])
        assert layout.is_visible("E") is visible


class TestTimelineWindow:

    @pytest.mark.parametrize("spec", _data["windows"], ids=lambda s: s["id"])
    def test_sunday_anchored(self, spec):
        from mission_calendar.timeline import timeline_window

        start, end = timeline_window(date.fromisoformat(spec["current"]))
        assert start == date.fromisoformat(spec["start"])
        assert end == date.fromisoformat(spec["end"])
