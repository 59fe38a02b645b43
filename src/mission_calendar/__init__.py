"""mission-calendar: Layout and dependency engine for a team mission calendar."""

from mission_calendar.commands import (
    ConflictResolve,
    LinkCreate,
    LinkRemove,
    Reschedule,
    StickerToggle,
    apply_command,
)
from mission_calendar.conflict import ConflictProposal, check_conflict, find_conflicts
from mission_calendar.drag import InteractionState, day_delta, on_drag_release
from mission_calendar.links import render_links
from mission_calendar.session import CalendarSession, CommandResult
from mission_calendar.store import EventStore, InMemoryEventStore
from mission_calendar.timeline import (
    DESKTOP,
    MOBILE,
    TimelineMetrics,
    layout_timeline,
    timeline_window,
)
from mission_calendar.types import (
    CalendarEvent,
    EventValidationError,
    InvalidOperationError,
    StoreWriteError,
)
from mission_calendar.weekly import layout_month, layout_week

__all__ = [
    "CalendarEvent",
    "CalendarSession",
    "CommandResult",
    "ConflictProposal",
    "ConflictResolve",
    "DESKTOP",
    "EventStore",
    "EventValidationError",
    "InMemoryEventStore",
    "InteractionState",
    "InvalidOperationError",
    "LinkCreate",
    "LinkRemove",
    "MOBILE",
    "Reschedule",
    "StickerToggle",
    "StoreWriteError",
    "TimelineMetrics",
    "apply_command",
    "check_conflict",
    "day_delta",
    "find_conflicts",
    "layout_month",
    "layout_timeline",
    "layout_week",
    "on_drag_release",
    "render_links",
    "timeline_window",
]
