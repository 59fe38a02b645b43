"""Board filters applied before layout."""

from __future__ import annotations

from typing import Collection, Iterable

from mission_calendar.types import EVENT_TYPES, PRIORITIES, SYSTEM_ASSIGNEE, CalendarEvent


def filter_events(
    events: Iterable[CalendarEvent],
    types: Collection[str] = EVENT_TYPES,
    priorities: Collection[str] = PRIORITIES,
    show_system_logs: bool = False,
) -> list[CalendarEvent]:
    """Keep events matching the active types and priorities.

    Entries written by the System assignee are activity logs and are hidden
    unless show_system_logs is set.
    """
    return [
        e for e in events
        if (show_system_logs or e.assignee != SYSTEM_ASSIGNEE)
        and e.type in types
        and e.priority in priorities
    ]
