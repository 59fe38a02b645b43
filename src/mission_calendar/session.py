"""Optimistic command pipeline between the board and the event store.

The session keeps the store's last snapshot as the canonical state and a
list of pending commands on top of it. Views read canonical + pending, so a
dragged card or a new link shows immediately. A failed write drops its
overlay, which rolls the view back; the canonical state only ever changes
when the store pushes a new snapshot.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from mission_calendar.commands import (
    Command,
    ConflictResolve,
    LinkCreate,
    LinkRemove,
    Reschedule,
    StickerToggle,
    apply_command,
)
from mission_calendar.conflict import ConflictProposal, check_link
from mission_calendar.drag import on_drag_release
from mission_calendar.links import create_link, remove_link
from mission_calendar.store import EventStore
from mission_calendar.timeline import (
    DESKTOP,
    TIMELINE_DAYS,
    TimelineLayout,
    TimelineMetrics,
    layout_timeline,
    timeline_window,
)
from mission_calendar.types import (
    STICKERS,
    CalendarEvent,
    InvalidOperationError,
    StoreWriteError,
)
from mission_calendar.weekly import WeekLayout, layout_month, layout_week

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one submitted command.

    proposal is set when a newly created link is a temporal paradox; resolve
    it with CalendarSession.resolve_conflict before creating other links.
    """

    command: Command
    ok: bool
    error: StoreWriteError | None = None
    proposal: ConflictProposal | None = None


def _touched(command: Command) -> tuple[str, ...]:
    """Ids of the events a command changes."""
    if isinstance(command, (Reschedule, StickerToggle)):
        return (command.event_id,)
    if isinstance(command, ConflictResolve) and command.resolution == "swap":
        return (command.target_id, command.source_id)
    return (command.target_id,)


def _effect(command: Command, event: CalendarEvent) -> tuple:
    """The fields of event that command is responsible for."""
    if isinstance(command, Reschedule):
        return event.start_date, event.end_date
    if isinstance(command, (LinkCreate, LinkRemove)):
        return event.linked_event_ids
    if isinstance(command, StickerToggle):
        return event.stickers
    return event.start_date, event.end_date, event.linked_event_ids


@dataclass
class _Overlay:
    ticket: int
    command: Command
    expected: dict[str, tuple] = field(default_factory=dict)
    last_seen: dict[str, tuple] = field(default_factory=dict)
    confirmed: bool = False

    def observe(self, events: Iterable[CalendarEvent]) -> dict[str, tuple]:
        """Current fields of the touched events that still exist."""
        by_id = {e.id: e for e in events}
        return {
            event_id: _effect(self.command, by_id[event_id])
            for event_id in self.expected
            if event_id in by_id
        }

    def settled(self, observed: dict[str, tuple]) -> bool:
        """True once the store shows the result this command was written to produce.

        Touched events that have since been deleted count as settled.
        """
        return all(observed[i] == self.expected[i] for i in observed)

    def superseded(self, observed: dict[str, tuple]) -> bool:
        """True when another write changed a touched event to something else."""
        return any(
            i in self.last_seen and observed[i] != self.last_seen[i] for i in observed
        )


class CalendarSession:
    """One board's view of the store. Construct once and pass it around."""

    def __init__(self, store: EventStore) -> None:
        self._store = store
        self._canonical: tuple[CalendarEvent, ...] = ()
        self._overlays: list[_Overlay] = []
        self._tickets = itertools.count(1)
        self._unsubscribe = store.subscribe(self._on_snapshot)

    def close(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def canonical(self) -> tuple[CalendarEvent, ...]:
        return self._canonical

    @property
    def events(self) -> tuple[CalendarEvent, ...]:
        """Canonical snapshot with pending commands applied in issue order."""
        events = self._canonical
        for overlay in self._overlays:
            events = apply_command(events, overlay.command)
        return events

    @property
    def pending(self) -> tuple[Command, ...]:
        return tuple(o.command for o in self._overlays)

    def event(self, event_id: str) -> CalendarEvent | None:
        for event in self.events:
            if event.id == event_id:
                return event
        return None

    def week(self, week_start: date | datetime) -> WeekLayout:
        return layout_week(week_start, self.events)

    def month(self, current: date | datetime) -> list[WeekLayout]:
        return layout_month(current, self.events)

    def timeline(
        self,
        current: date | datetime,
        days: int = TIMELINE_DAYS,
        metrics: TimelineMetrics = DESKTOP,
    ) -> TimelineLayout:
        start, _ = timeline_window(current, days)
        return layout_timeline(start, days, self.events, metrics=metrics)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def reschedule(self, event_id: str, day_delta: int) -> CommandResult:
        """Move an event by whole days, keeping its duration."""
        if day_delta == 0:
            raise InvalidOperationError("reschedule", event_id, "zero day delta")
        self._require(event_id, "reschedule")
        return self._submit(Reschedule(event_id=event_id, day_delta=day_delta))

    def release_drag(
        self, event_id: str, offset_px: float, day_width: float
    ) -> CommandResult | None:
        """Submit the drag outcome; None when the card snaps back."""
        command = on_drag_release(event_id, offset_px, day_width)
        if command is None:
            return None
        self._require(event_id, "reschedule")
        return self._submit(command)

    def create_link(self, source_id: str, target_id: str) -> CommandResult:
        """Add source -> target, then check the pair for a temporal paradox."""
        command = create_link(self.events, source_id, target_id)
        result = self._submit(command)
        if not result.ok:
            return result

        proposal = check_link(self.events, target_id, source_id)
        if proposal is not None:
            logger.info(
                "Link %s -> %s starts %d day(s) early",
                source_id, target_id, proposal.shift_amount,
            )
        return CommandResult(command=command, ok=True, proposal=proposal)

    def remove_link(self, target_id: str, source_id: str) -> CommandResult:
        return self._submit(remove_link(self.events, target_id, source_id))

    def resolve_conflict(
        self, proposal: ConflictProposal, resolution: str
    ) -> CommandResult:
        """Commit exactly one resolution for a proposal from create_link."""
        target = self._require(proposal.target.id, "resolve")
        self._require(proposal.source.id, "resolve")
        if not target.depends_on(proposal.source.id):
            raise InvalidOperationError(
                "resolve", target.id, f"no longer linked to {proposal.source.id!r}"
            )
        return self._submit(proposal.resolve(resolution))

    def toggle_sticker(self, event_id: str, sticker: str) -> CommandResult:
        if sticker not in STICKERS:
            raise InvalidOperationError("stamp", event_id, f"unknown sticker {sticker!r}")
        self._require(event_id, "stamp")
        return self._submit(StickerToggle(event_id=event_id, sticker=sticker))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, event_id: str, operation: str) -> CalendarEvent:
        event = self.event(event_id)
        if event is None:
            raise InvalidOperationError(operation, event_id, "unknown event")
        return event

    def _on_snapshot(self, events: tuple[CalendarEvent, ...]) -> None:
        # Last write wins: the store's snapshot replaces canonical state.
        self._canonical = tuple(events)
        self._settle()

    def _settle(self) -> None:
        """Drop confirmed overlays that the canonical state has caught up with.

        The store applies writes in order, so once the result of one overlay
        shows, every earlier overlay on the same events has landed too. An
        overlay is also dropped when another write changed one of its events
        to something else (last write wins), unless an earlier overlay on
        that event was still pending at this snapshot.
        """
        landed: set[int] = set()
        covered: set[str] = set()
        for overlay in reversed(self._overlays):
            if not overlay.confirmed:
                continue
            ids = set(_touched(overlay.command))
            if ids & covered or overlay.settled(overlay.observe(self._canonical)):
                landed.add(overlay.ticket)
                covered |= ids

        kept: list[_Overlay] = []
        earlier: set[str] = set()
        for overlay in self._overlays:
            ids = set(_touched(overlay.command))
            blocked = bool(ids & earlier)
            earlier |= ids
            if overlay.ticket in landed:
                continue
            if overlay.confirmed:
                observed = overlay.observe(self._canonical)
                if not blocked and overlay.superseded(observed):
                    logger.info("Dropped %r: overwritten by another write", overlay.command)
                    continue
                overlay.last_seen = observed
            kept.append(overlay)
        self._overlays = kept

    def _submit(self, command: Command) -> CommandResult:
        overlay = _Overlay(ticket=next(self._tickets), command=command)
        self._overlays.append(overlay)
        view = {e.id: e for e in self.events}
        overlay.expected = {
            event_id: _effect(command, view[event_id])
            for event_id in _touched(command)
            if event_id in view
        }
        logger.debug("Submitting %r", command)

        error: StoreWriteError | None = None
        try:
            if not self._write(command):
                error = StoreWriteError(command, "store reported failure")
        except StoreWriteError as e:
            error = e
        except Exception as e:  # transport failures are fatal to this command only
            error = StoreWriteError(command, f"{type(e).__name__}: {e}")

        if error is not None:
            self._drop(overlay)
            logger.warning("Rolled back %r: %s", command, error.reason)
            return CommandResult(command=command, ok=False, error=error)

        # Held until a snapshot carries the result, which may already have arrived.
        overlay.confirmed = True
        overlay.last_seen = overlay.observe(self._canonical)
        self._settle()
        return CommandResult(command=command, ok=True)

    def _drop(self, overlay: _Overlay) -> None:
        self._overlays = [o for o in self._overlays if o.ticket != overlay.ticket]

    def _write(self, command: Command) -> bool:
        store = self._store
        if isinstance(command, Reschedule):
            return store.apply_reschedule(command.event_id, command.day_delta)
        if isinstance(command, LinkCreate):
            return store.apply_link_create(command.target_id, command.source_id)
        if isinstance(command, LinkRemove):
            return store.apply_link_remove(command.target_id, command.source_id)
        if isinstance(command, ConflictResolve):
            return store.apply_conflict_resolution(
                command.target_id,
                command.source_id,
                command.resolution,
                command.computed_start,
            )
        if isinstance(command, StickerToggle):
            return store.apply_sticker_toggle(command.event_id, command.sticker)
        raise TypeError(f"unknown command type {type(command).__name__}")
