"""Tests for drag-to-reschedule translation and interaction modes.

Test data loaded from: data/fixtures/scenarios/drag.json
"""

from __future__ import annotations

import pytest

from conftest import load_scenarios, make_event

_data = load_scenarios("drag")


class TestDayDelta:

    @pytest.mark.parametrize("spec", _data["day_delta"], ids=lambda s: s["id"])
    def test_rounding(self, spec):
        from mission_calendar.drag import day_delta

        assert day_delta(spec["offset"], spec["day_width"]) == spec["expected"]

    def test_rejects_zero_width(self):
        from mission_calendar.drag import day_delta

        with pytest.raises(ValueError):
            day_delta(10, 0)


class TestOnDragRelease:

    def test_snap_back_issues_nothing(self):
        from mission_calendar.drag import on_drag_release

        assert on_drag_release("A", 20, 60) is None

    def test_command(self):
        from mission_calendar.commands import Reschedule
        from mission_calendar.drag import on_drag_release

        assert on_drag_release("A", -125, 60) == Reschedule(event_id="A", day_delta=-2)


class TestInteractionState:

    def test_drag_round_trip(self):
        from mission_calendar.commands import Reschedule
        from mission_calendar.drag import InteractionState

        state = InteractionState()
        state.begin_drag("A")
        assert state.dragging_id == "A"
        assert state.end_drag(120, 60) == Reschedule("A", 2)
        assert state.dragging_id is None

    def test_cancel_has_no_effect(self):
        from mission_calendar.drag import InteractionState

        state = InteractionState()
        state.begin_drag("A")
        state.cancel_drag()
        assert state.end_drag(600, 60) is None

    def test_linking_disables_drag(self):
        from mission_calendar.drag import InteractionState
        from mission_calendar.types import InvalidOperationError

        state = InteractionState()
        state.toggle_linking()
        assert not state.can_drag("A")
        with pytest.raises(InvalidOperationError):
            state.begin_drag("A")

    def test_entering_linking_cancels_drag(self):
        from mission_calendar.drag import InteractionState

        state = InteractionState()
        state.begin_drag("A")
        state.toggle_linking()
        assert state.dragging_id is None

    def test_stamping_disables_drag(self):
        from mission_calendar.drag import InteractionState

        state = InteractionState()
        state.set_stamping(True)
        assert not state.can_drag("A")
        state.set_stamping(False)
        assert state.can_drag("A")

    def test_one_drag_at_a_time(self):
        from mission_calendar.drag import InteractionState

        state = InteractionState()
        state.begin_drag("A")
        assert state.can_drag("A")
        assert not state.can_drag("B")

    def test_linking_and_unlinking_exclusive(self):
        from mission_calendar.drag import InteractionState

        state = InteractionState()
        state.toggle_linking()
        state.toggle_unlinking()
        assert state.unlinking and not state.linking
        state.toggle_linking()
        assert state.linking and not state.unlinking


class TestPickLinkEndpoint:

    def test_two_click_gesture(self):
        from mission_calendar.commands import LinkCreate
        from mission_calendar.drag import InteractionState

        a = make_event("A", "2025-06-01", "2025-06-05")
        b = make_event("B", "2025-06-06", "2025-06-07")
        state = InteractionState()
        state.toggle_linking()

        assert state.pick_link_endpoint(a) is None
        assert state.link_source_id == "A"
        assert state.pick_link_endpoint(b) == LinkCreate(target_id="B", source_id="A")

    def test_reclick_source_clears(self):
        from mission_calendar.drag import InteractionState

        a = make_event("A", "2025-06-01", "2025-06-05")
        state = InteractionState()
        state.toggle_linking()
        state.pick_link_endpoint(a)
        assert state.pick_link_endpoint(a) is None
        assert state.link_source_id is None

    def test_already_linked(self):
        from mission_calendar.drag import InteractionState
        from mission_calendar.types import InvalidOperationError

        a = make_event("A", "2025-06-01", "2025-06-05")
        b = make_event("B", "2025-06-06", "2025-06-07", links=("A",))
        state = InteractionState()
        state.toggle_linking()
        state.pick_link_endpoint(a)
        with pytest.raises(InvalidOperationError, match="already linked"):
            state.pick_link_endpoint(b)

    def test_requires_linking_mode(self):
        from mission_calendar.drag import InteractionState
        from mission_calendar.types import InvalidOperationError

        with pytest.raises(InvalidOperationError):
            InteractionState().pick_link_endpoint(make_event("A", "2025-06-01", "2025-06-01"))
