"""Mutation intents sent to the event store, and the reducer that applies them.

The core never writes storage. It issues one of a closed set of commands;
apply_command is the single definition of what each command does to an
event snapshot, shared by the optimistic overlay and the in-memory store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Union

from mission_calendar.dates import add_days
from mission_calendar.types import CalendarEvent

RESOLUTIONS = ("push", "swap", "sever")


@dataclass(frozen=True)
class Reschedule:
    """Shift both dates of an event by day_delta, keeping its duration."""

    event_id: str
    day_delta: int


@dataclass(frozen=True)
class LinkCreate:
    """Make target depend on source."""

    target_id: str
    source_id: str


@dataclass(frozen=True)
class LinkRemove:
    target_id: str
    source_id: str


@dataclass(frozen=True)
class ConflictResolve:
    """Commit one resolution of a temporal paradox on source -> target.

    computed_start is the safe date for "push"; None for other resolutions.
    """

    target_id: str
    source_id: str
    resolution: str
    computed_start: date | None = None

    def __post_init__(self) -> None:
        if self.resolution not in RESOLUTIONS:
            raise ValueError(
                f"resolution must be one of {RESOLUTIONS}, got {self.resolution!r}"
            )


@dataclass(frozen=True)
class StickerToggle:
    """Add the sticker if absent, remove it if present."""

    event_id: str
    sticker: str


Command = Union[Reschedule, LinkCreate, LinkRemove, ConflictResolve, StickerToggle]


def _without(ids: tuple[str, ...], drop: str) -> tuple[str, ...]:
    return tuple(i for i in ids if i != drop)


def _with(ids: tuple[str, ...], add: str) -> tuple[str, ...]:
    return ids if add in ids else ids + (add,)


def _apply_resolution(
    by_id: dict[str, CalendarEvent], command: ConflictResolve
) -> None:
    target = by_id.get(command.target_id)
    if target is None:
        return

    if command.resolution == "push":
        start = command.computed_start
        if start is None:
            source = by_id.get(command.source_id)
            if source is None:
                return
            start = add_days(source.end_date, 1)
        by_id[target.id] = target.with_dates(
            start, add_days(start, target.duration_days)
        )
    elif command.resolution == "sever":
        by_id[target.id] = target.with_links(
            _without(target.linked_event_ids, command.source_id)
        )
    else:
        # swap: the old target becomes the prerequisite of the old source
        by_id[target.id] = target.with_links(
            _without(target.linked_event_ids, command.source_id)
        )
        source = by_id.get(command.source_id)
        if source is not None:
            by_id[source.id] = source.with_links(
                _with(source.linked_event_ids, target.id)
            )


def apply_command(
    events: Iterable[CalendarEvent], command: Command
) -> tuple[CalendarEvent, ...]:
    """Return a new snapshot with command applied. Input order is kept.

    Commands naming an event that is not in the snapshot leave it unchanged.
    """
    by_id = {e.id: e for e in events}
    order = list(by_id)

    if isinstance(command, Reschedule):
        event = by_id.get(command.event_id)
        if event is not None:
            by_id[event.id] = event.with_dates(
                add_days(event.start_date, command.day_delta),
                add_days(event.end_date, command.day_delta),
            )
    elif isinstance(command, LinkCreate):
        target = by_id.get(command.target_id)
        if target is not None:
            by_id[target.id] = target.with_links(
                _with(target.linked_event_ids, command.source_id)
            )
    elif isinstance(command, LinkRemove):
        target = by_id.get(command.target_id)
        if target is not None:
            by_id[target.id] = target.with_links(
                _without(target.linked_event_ids, command.source_id)
            )
    elif isinstance(command, ConflictResolve):
        _apply_resolution(by_id, command)
    elif isinstance(command, StickerToggle):
        event = by_id.get(command.event_id)
        if event is not None:
            if command.sticker in event.stickers:
                stickers = _without(event.stickers, command.sticker)
            else:
                stickers = event.stickers + (command.sticker,)
            by_id[event.id] = event.with_stickers(stickers)
    else:
        raise TypeError(f"unknown command type {type(command).__name__}")

    return tuple(by_id[i] for i in order)
