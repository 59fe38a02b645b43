"""Drag-to-reschedule translation and per-board interaction modes.

A drag is client-local until release: intermediate offsets have no effect,
and only the terminal offset is turned into a Reschedule command.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from mission_calendar.commands import LinkCreate, Reschedule
from mission_calendar.types import CalendarEvent, InvalidOperationError


def day_delta(offset_px: float, day_width: float) -> int:
    """Whole days moved by a horizontal pixel offset.

    Rounds to the nearest day with halves going towards +infinity
    (-1.5 days -> -1, 1.5 days -> 2), the same rule in both directions of
    travel as a browser's Math.round.
    """
    if day_width <= 0:
        raise ValueError(f"day_width must be > 0, got {day_width}")
    return math.floor(offset_px / day_width + 0.5)


def on_drag_release(
    event_id: str, offset_px: float, day_width: float
) -> Reschedule | None:
    """Command for a finished drag, or None when the card snaps back."""
    delta = day_delta(offset_px, day_width)
    if delta == 0:
        return None
    return Reschedule(event_id=event_id, day_delta=delta)


@dataclass
class InteractionState:
    """Board-level interaction modes. Mutable, one per board.

    Dragging is disabled while linking or stamping, and entering either
    mode cancels a drag in progress.
    """

    linking: bool = False
    unlinking: bool = False
    stamping: bool = False
    link_source_id: str | None = None
    dragging_id: str | None = None

    def can_drag(self, event_id: str) -> bool:
        if self.linking or self.stamping:
            return False
        return self.dragging_id is None or self.dragging_id == event_id

    def begin_drag(self, event_id: str) -> None:
        if not self.can_drag(event_id):
            raise InvalidOperationError(
                "drag", event_id, "dragging is disabled in the current mode"
            )
        self.dragging_id = event_id

    def end_drag(self, offset_px: float, day_width: float) -> Reschedule | None:
        """Release the active drag. Returns a command or None (snap back)."""
        event_id = self.dragging_id
        self.dragging_id = None
        if event_id is None:
            return None
        return on_drag_release(event_id, offset_px, day_width)

    def cancel_drag(self) -> None:
        self.dragging_id = None

    def toggle_linking(self) -> None:
        self.linking = not self.linking
        self.unlinking = False
        self.link_source_id = None
        self.cancel_drag()

    def toggle_unlinking(self) -> None:
        self.unlinking = not self.unlinking
        self.linking = False
        self.link_source_id = None

    def set_stamping(self, stamping: bool) -> None:
        self.stamping = stamping
        if stamping:
            self.cancel_drag()

    def pick_link_endpoint(self, event: CalendarEvent) -> LinkCreate | None:
        """Two-click link gesture.

        The first pick chooses the source; picking the source again clears
        it. Picking another event returns a LinkCreate for that target and
        keeps the source so several targets can be chained from it.

        Raises InvalidOperationError when not linking or when the target
        already depends on the chosen source.
        """
        if not self.linking:
            raise InvalidOperationError("link", event.id, "not in linking mode")

        if self.link_source_id is None:
            self.link_source_id = event.id
            return None
        if self.link_source_id == event.id:
            self.link_source_id = None
            return None
        if event.depends_on(self.link_source_id):
            raise InvalidOperationError("link", event.id, "already linked")
        return LinkCreate(target_id=event.id, source_id=self.link_source_id)
