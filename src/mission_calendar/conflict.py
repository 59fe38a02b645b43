"""Temporal paradox detection and its three resolutions.

A paradox exists on an edge source -> target when the target starts before
the source ends. The safe date is the day after the source ends. Exactly one
resolution is committed per proposal; dismissing it commits nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from mission_calendar.commands import RESOLUTIONS, ConflictResolve
from mission_calendar.dates import add_days, days_between
from mission_calendar.types import CalendarEvent


def day_label(d: date) -> str:
    """Short dialog date with an ordinal day: "Jun 6th", "Jun 22nd"."""
    if 11 <= d.day <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(d.day % 10, "th")
    return f"{d.strftime('%b')} {d.day}{suffix}"


def is_paradox(source: CalendarEvent, target: CalendarEvent) -> bool:
    return target.start_date < source.end_date


def safe_date(source: CalendarEvent) -> date:
    """Earliest start for a dependent of source."""
    return add_days(source.end_date, 1)


@dataclass(frozen=True)
class ConflictProposal:
    """The choices offered for one paradox edge."""

    source: CalendarEvent
    target: CalendarEvent
    safe_date: date
    shift_amount: int

    @property
    def pushed_dates(self) -> tuple[date, date]:
        """Target dates after "push": same duration, starting on safe_date."""
        return self.safe_date, add_days(self.safe_date, self.target.duration_days)

    def resolve(self, resolution: str) -> ConflictResolve:
        if resolution not in RESOLUTIONS:
            raise ValueError(
                f"resolution must be one of {RESOLUTIONS}, got {resolution!r}"
            )
        return ConflictResolve(
            target_id=self.target.id,
            source_id=self.source.id,
            resolution=resolution,
            computed_start=self.safe_date if resolution == "push" else None,
        )

    def describe(self) -> dict[str, str]:
        """One-line summary of each resolution, for the dialog."""
        return {
            "push": (
                f"Push {self.target.title} forward {self.shift_amount} days "
                f"to start on {day_label(self.safe_date)}."
            ),
            "swap": f"Make {self.target.title} the source instead.",
            "sever": f"Remove the link from {self.source.title}.",
        }


def check_conflict(
    source: CalendarEvent, target: CalendarEvent
) -> ConflictProposal | None:
    """Proposal for the edge source -> target, or None when it is safe.

    shift_amount is signed: the number of days target must move forward to
    start on the safe date.
    """
    if not is_paradox(source, target):
        return None
    safe = safe_date(source)
    return ConflictProposal(
        source=source,
        target=target,
        safe_date=safe,
        shift_amount=days_between(target.start_date, safe),
    )


def check_link(
    events: Iterable[CalendarEvent], target_id: str, source_id: str
) -> ConflictProposal | None:
    """check_conflict by id. Missing endpoints are never in conflict."""
    by_id = {e.id: e for e in events}
    source = by_id.get(source_id)
    target = by_id.get(target_id)
    if source is None or target is None:
        return None
    return check_conflict(source, target)


def find_conflicts(events: Iterable[CalendarEvent]) -> list[ConflictProposal]:
    """Re-evaluate every existing edge, in event then link order."""
    events = list(events)
    by_id = {e.id: e for e in events}
    proposals: list[ConflictProposal] = []
    for target in events:
        for source_id in target.linked_event_ids:
            source = by_id.get(source_id)
            if source is None:
                continue
            proposal = check_conflict(source, target)
            if proposal is not None:
                proposals.append(proposal)
    return proposals
