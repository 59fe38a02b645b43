"""Layer 1: weekly lane packing for the month grid.

Each week row of the grid is laid out independently. Events are clipped to
the week, sorted, and greedily assigned to the lowest free lane ("slot").
This is interval-graph colouring by first fit, not a minimum-lane solver.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from mission_calendar.dates import (
    SUNDAY,
    add_days,
    days_between,
    month_weeks,
    normalize_date,
)
from mission_calendar.types import CalendarEvent

DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class LayoutItem:
    """One event placed on a week row.

    col is 1-indexed (1 = first day of the week); the item covers the
    half-open column range [col, col + span).
    """

    event: CalendarEvent
    col: int
    span: int
    slot: int
    continues_before: bool
    continues_after: bool

    @property
    def end_col(self) -> int:
        """One past the last column covered."""
        return self.col + self.span

    def overlaps(self, col: int, span: int) -> bool:
        return col < self.end_col and col + span > self.col


@dataclass(frozen=True)
class WeekLayout:
    """Lane assignment for one week. Derived, never stored."""

    week_start: date
    placed_items: tuple[LayoutItem, ...]
    total_slots: int

    def items_in_slot(self, slot: int) -> list[LayoutItem]:
        return [item for item in self.placed_items if item.slot == slot]

    def item_for(self, event_id: str) -> LayoutItem | None:
        for item in self.placed_items:
            if item.event.id == event_id:
                return item
        return None


@dataclass(frozen=True)
class ClippedSpan:
    """An event's portion inside one week, before lane assignment."""

    event: CalendarEvent
    col: int
    span: int
    continues_before: bool
    continues_after: bool


def clip_to_week(event: CalendarEvent, week_start: date) -> ClippedSpan | None:
    """Clip an event to [week_start, week_start + 7). None if no overlap."""
    week_end = add_days(week_start, DAYS_PER_WEEK)
    start = event.start_date
    end_exclusive = add_days(event.end_date, 1)

    visible_start = max(start, week_start)
    visible_end = min(end_exclusive, week_end)
    if visible_end <= visible_start:
        return None

    return ClippedSpan(
        event=event,
        col=days_between(week_start, visible_start) + 1,
        span=days_between(visible_start, visible_end),
        continues_before=start < week_start,
        continues_after=end_exclusive > week_end,
    )


def layout_week(
    week_start: date | datetime,
    events: Iterable[CalendarEvent],
) -> WeekLayout:
    """Pack the events overlapping one week into non-overlapping lanes.

    Candidates are ordered by (col asc, span desc, id asc) so longer events
    claim a lane first; the order is total, making the result deterministic.
    Each candidate takes the lowest slot with no column overlap, opening a
    new slot when every existing one collides.

    Args:
        week_start: First day of the week; time of day is ignored.
        events: Event snapshot. Events outside the week are dropped.

    Returns:
        WeekLayout with placed items in placement order and the slot count.
    """
    week_start = normalize_date(week_start, "week_start")

    candidates = [
        c for c in (clip_to_week(e, week_start) for e in events) if c is not None
    ]
    candidates.sort(key=lambda c: (c.col, -c.span, c.event.id))

    # slots[i] holds the (col, end_col) ranges already placed in lane i
    slots: list[list[tuple[int, int]]] = []
    placed: list[LayoutItem] = []

    for cand in candidates:
        item_start = cand.col
        item_end = cand.col + cand.span

        slot = 0
        while True:
            if slot == len(slots):
                slots.append([])
            collision = any(
                item_start < slot_end and item_end > slot_start
                for slot_start, slot_end in slots[slot]
            )
            if not collision:
                break
            slot += 1

        slots[slot].append((item_start, item_end))
        placed.append(
            LayoutItem(
                event=cand.event,
                col=cand.col,
                span=cand.span,
                slot=slot,
                continues_before=cand.continues_before,
                continues_after=cand.continues_after,
            )
        )

    return WeekLayout(
        week_start=week_start,
        placed_items=tuple(placed),
        total_slots=len(slots),
    )


def layout_month(
    current: date | datetime,
    events: Iterable[CalendarEvent],
    week_start: int = SUNDAY,
) -> list[WeekLayout]:
    """One WeekLayout per row of the month grid containing current."""
    current = normalize_date(current, "current")
    events = list(events)
    return [layout_week(week[0], events) for week in month_weeks(current, week_start)]
