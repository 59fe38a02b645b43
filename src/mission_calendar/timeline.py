"""Layer 1: pixel coordinates for the scrollable multi-week timeline board.

The board has a fixed sidebar on the left, one column per day, and one row
per event. Rows are grouped by event type in a fixed order; a group with no
events in the window takes no space. Only events intersecting the window get
coordinates, and exactly those events are "visible".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Sequence

from mission_calendar.dates import add_days, days_between, normalize_date, start_of_week
from mission_calendar.types import EVENT_TYPES, CalendarEvent

TIMELINE_DAYS = 46
TOTAL_HEIGHT_PADDING = 200


@dataclass(frozen=True)
class TimelineMetrics:
    """Pixel sizes of the board. Immutable; pick a preset or load one."""

    day_width: float
    row_height: float
    group_header_height: float
    grid_header_height: float
    sidebar_width: float
    card_margin: float

    def board_width(self, days: int) -> float:
        return self.sidebar_width + days * self.day_width


DESKTOP = TimelineMetrics(
    day_width=60,
    row_height=60,
    group_header_height=60,
    grid_header_height=56,
    sidebar_width=280,
    card_margin=8,
)
MOBILE = TimelineMetrics(
    day_width=46,
    row_height=56,
    group_header_height=40,
    grid_header_height=48,
    sidebar_width=100,
    card_margin=8,
)


@dataclass(frozen=True)
class Coordinate:
    """Card geometry: leading edge x_start, trailing edge x_end, row centre y."""

    x_start: float
    x_end: float
    y: float


@dataclass(frozen=True)
class TimelineLayout:
    """Derived board geometry for one window and event snapshot."""

    window_start: date
    window_end: date
    coordinates: dict[str, Coordinate]
    visible_ids: frozenset[str]
    groups: dict[str, tuple[CalendarEvent, ...]]
    source_ids: frozenset[str]
    total_height: float
    board_width: float
    metrics: TimelineMetrics = field(default=DESKTOP)

    def coordinate(self, event_id: str) -> Coordinate | None:
        return self.coordinates.get(event_id)

    def is_visible(self, event_id: str) -> bool:
        return event_id in self.visible_ids


def timeline_window(
    current: date | datetime, days: int = TIMELINE_DAYS
) -> tuple[date, date]:
    """(start, end) of the board: start is the Sunday on/before current,
    end is inclusive, so the board shows exactly `days` columns."""
    start = start_of_week(normalize_date(current, "current"))
    return start, add_days(start, days - 1)


def intersects_window(event: CalendarEvent, window_start: date, window_end: date) -> bool:
    """True if [start, end] meets the inclusive window [window_start, window_end]."""
    return not (event.end_date < window_start or event.start_date > window_end)


def layout_timeline(
    window_start: date | datetime,
    window_days: int,
    events: Iterable[CalendarEvent],
    group_order: Sequence[str] = EVENT_TYPES,
    metrics: TimelineMetrics = DESKTOP,
) -> TimelineLayout:
    """Compute card coordinates for every event intersecting the window.

    Groups are walked in group_order; events keep their input order within
    a group. A vertical cursor starts below the grid header, grows by a group
    header for each non-empty group and by one row per event. Each card is
    clipped to the window before its x range is derived.

    Args:
        window_start: First day shown; time of day is ignored.
        window_days: Number of day columns (window end is inclusive).
        events: Event snapshot. Events of a type missing from group_order
            are never visible.
        group_order: Fixed category order of the row groups.
        metrics: Pixel sizes.

    Returns:
        TimelineLayout. Every id in visible_ids has a coordinate and no
        other id does.
    """
    window_start = normalize_date(window_start, "window_start")
    window_end = add_days(window_start, window_days - 1)
    events = list(events)

    coordinates: dict[str, Coordinate] = {}
    groups: dict[str, tuple[CalendarEvent, ...]] = {}
    y_cursor = metrics.grid_header_height

    for group in group_order:
        members = tuple(
            e for e in events
            if e.type == group and intersects_window(e, window_start, window_end)
        )
        groups[group] = members
        if not members:
            continue

        y_cursor += metrics.group_header_height
        for event in members:
            effective_start = max(event.start_date, window_start)
            effective_end = min(event.end_date, window_end)
            duration = days_between(effective_start, effective_end) + 1

            x_start = (
                days_between(window_start, effective_start) * metrics.day_width
                + metrics.sidebar_width
            )
            x_end = x_start + duration * metrics.day_width - metrics.card_margin
            coordinates[event.id] = Coordinate(
                x_start=x_start,
                x_end=x_end,
                y=y_cursor + metrics.row_height / 2,
            )
            y_cursor += metrics.row_height

    visible_ids = frozenset(coordinates)

    # Visible events that feed at least one visible dependent
    source_ids = frozenset(
        source_id
        for e in events
        if e.id in visible_ids
        for source_id in e.linked_event_ids
        if source_id in visible_ids
    )

    return TimelineLayout(
        window_start=window_start,
        window_end=window_end,
        coordinates=coordinates,
        visible_ids=visible_ids,
        groups=groups,
        source_ids=source_ids,
        total_height=y_cursor + TOTAL_HEIGHT_PADDING,
        board_width=metrics.board_width(window_days),
        metrics=metrics,
    )
