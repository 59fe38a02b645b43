"""Shared types: CalendarEvent, domain constants, and errors."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date

from mission_calendar.dates import normalize_date

EVENT_TYPES: tuple[str, ...] = ("Training", "Goal", "Deadline", "Operation", "OneOnOne")
STATUSES: tuple[str, ...] = ("To Do", "In Progress", "Done")
PRIORITIES: tuple[str, ...] = ("High", "Medium", "Low")
STICKERS: tuple[str, ...] = ("star", "alert", "fire", "party", "check")

_EVENT_LABELS = {
    "Training": "Training Module",
    "Goal": "Strategic Goal",
    "Deadline": "Hard Deadline",
    "Operation": "Unit Operation",
    "OneOnOne": "1-on-1 Session",
}

SYSTEM_ASSIGNEE = "System"


def event_label(event_type: str) -> str:
    """Group header label for an event type. Unknown types echo back."""
    return _EVENT_LABELS.get(event_type, event_type)


@dataclass(frozen=True)
class CalendarEvent:
    """Immutable snapshot of one mission on the calendar.

    Invariants:
        - start_date <= end_date, both inclusive
        - stickers has no duplicates
        - linked_event_ids lists the events this one depends on (sources);
          entries may name events that are not loaded
    """

    id: str
    title: str
    assignee: str
    start_date: date
    end_date: date
    type: str
    status: str = "To Do"
    priority: str = "Medium"
    team_member_id: str | None = None
    assignee_name: str | None = None
    team_member_name: str | None = None
    description: str | None = None
    stickers: tuple[str, ...] = ()
    linked_event_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Boundary check: layout assumes start <= end and whole-day dates.
        errors: list[str] = []
        for name in ("start_date", "end_date"):
            try:
                object.__setattr__(self, name, normalize_date(getattr(self, name), name))
            except TypeError as e:
                errors.append(str(e))
        if not errors and self.end_date < self.start_date:
            errors.append(
                f"end_date {self.end_date.isoformat()} is before "
                f"start_date {self.start_date.isoformat()}"
            )
        if len(set(self.stickers)) != len(self.stickers):
            errors.append(f"duplicate stickers in {list(self.stickers)}")
        if errors:
            raise EventValidationError(self.id, errors)
        object.__setattr__(self, "stickers", tuple(self.stickers))
        object.__setattr__(self, "linked_event_ids", tuple(self.linked_event_ids))

    @property
    def duration_days(self) -> int:
        """Days from start to end; 0 for a single-day event."""
        return (self.end_date - self.start_date).days

    @property
    def occupied_days(self) -> int:
        """Number of calendar days the event covers."""
        return self.duration_days + 1

    def depends_on(self, source_id: str) -> bool:
        return source_id in self.linked_event_ids

    def with_dates(self, start_date: date, end_date: date) -> CalendarEvent:
        return replace(self, start_date=start_date, end_date=end_date)

    def with_links(self, linked_event_ids: tuple[str, ...]) -> CalendarEvent:
        return replace(self, linked_event_ids=tuple(linked_event_ids))

    def with_stickers(self, stickers: tuple[str, ...]) -> CalendarEvent:
        return replace(self, stickers=tuple(stickers))


class InvalidOperationError(Exception):
    """Raised when a request is rejected locally, before any store call."""

    def __init__(self, operation: str, event_id: str, reason: str) -> None:
        self.operation = operation
        self.event_id = event_id
        self.reason = reason
        super().__init__(
            f"Invalid {operation} on event {event_id!r}: {reason}"
        )


class StoreWriteError(Exception):
    """A store write failed. Fatal to that single command only."""

    def __init__(self, command: object, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(f"Store rejected {command!r} (reason: {reason})")


class EventValidationError(ValueError):
    """An event payload failed boundary validation."""

    def __init__(self, event_id: str | None, errors: list[str]) -> None:
        self.event_id = event_id
        self.errors = list(errors)
        super().__init__(
            f"Invalid event {event_id!r}:\n"
            + "\n".join(f"  - {e}" for e in self.errors)
        )
