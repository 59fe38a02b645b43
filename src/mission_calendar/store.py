"""Event store boundary and an in-memory implementation.

The store owns the canonical events. The core reads snapshots pushed through
subscribe() and asks for changes through the apply_* methods, each of which
reports success or failure.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable, Protocol

from mission_calendar.commands import (
    Command,
    ConflictResolve,
    LinkCreate,
    LinkRemove,
    Reschedule,
    StickerToggle,
    apply_command,
)
from mission_calendar.loaders import event_from_dict
from mission_calendar.types import CalendarEvent

logger = logging.getLogger(__name__)

Listener = Callable[[tuple[CalendarEvent, ...]], None]
Unsubscribe = Callable[[], None]


class EventStore(Protocol):
    """The collaborator the core talks to. Persistence details live behind it."""

    def subscribe(self, listener: Listener) -> Unsubscribe: ...

    def apply_reschedule(self, event_id: str, day_delta: int) -> bool: ...

    def apply_link_create(self, target_id: str, source_id: str) -> bool: ...

    def apply_link_remove(self, target_id: str, source_id: str) -> bool: ...

    def apply_conflict_resolution(
        self,
        target_id: str,
        source_id: str,
        resolution: str,
        computed_start: date | None = None,
    ) -> bool: ...

    def apply_sticker_toggle(self, event_id: str, sticker: str) -> bool: ...


class InMemoryEventStore:
    """Dict-backed EventStore. Notifies listeners synchronously on each write.

    Failures can be injected with fail_next() to exercise rollback paths.
    """

    def __init__(self, events: Iterable[CalendarEvent] = ()) -> None:
        self._events: tuple[CalendarEvent, ...] = tuple(events)
        self._listeners: list[Listener] = []
        self._failures: list[str] = []
        self.writes: list[Command] = []

    @classmethod
    def from_dicts(cls, payloads: Iterable[dict]) -> InMemoryEventStore:
        return cls(event_from_dict(p) for p in payloads)

    @property
    def events(self) -> tuple[CalendarEvent, ...]:
        return self._events

    def get(self, event_id: str) -> CalendarEvent | None:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register listener and push the current snapshot to it at once."""
        self._listeners.append(listener)
        listener(self._events)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def fail_next(self, reason: str = "unavailable", count: int = 1) -> None:
        """Make the next `count` writes report failure."""
        self._failures.extend([reason] * count)

    # ------------------------------------------------------------------
    # External writes (another client editing the same collection)
    # ------------------------------------------------------------------

    def put(self, event: CalendarEvent) -> None:
        """Insert or replace an event and notify listeners."""
        if self.get(event.id) is not None:
            events = tuple(event if e.id == event.id else e for e in self._events)
        else:
            events = self._events + (event,)
        self._replace(events)

    def delete(self, event_id: str) -> None:
        self._replace(tuple(e for e in self._events if e.id != event_id))

    # ------------------------------------------------------------------
    # EventStore protocol
    # ------------------------------------------------------------------

    def apply_reschedule(self, event_id: str, day_delta: int) -> bool:
        return self._write(Reschedule(event_id=event_id, day_delta=day_delta))

    def apply_link_create(self, target_id: str, source_id: str) -> bool:
        return self._write(LinkCreate(target_id=target_id, source_id=source_id))

    def apply_link_remove(self, target_id: str, source_id: str) -> bool:
        return self._write(LinkRemove(target_id=target_id, source_id=source_id))

    def apply_conflict_resolution(
        self,
        target_id: str,
        source_id: str,
        resolution: str,
        computed_start: date | None = None,
    ) -> bool:
        return self._write(
            ConflictResolve(
                target_id=target_id,
                source_id=source_id,
                resolution=resolution,
                computed_start=computed_start,
            )
        )

    def apply_sticker_toggle(self, event_id: str, sticker: str) -> bool:
        return self._write(StickerToggle(event_id=event_id, sticker=sticker))

    def _write(self, command: Command) -> bool:
        if self._failures:
            reason = self._failures.pop(0)
            logger.warning("Store write failed for %r: %s", command, reason)
            return False
        self.writes.append(command)
        logger.debug("Store applied %r", command)
        self._replace(apply_command(self._events, command))
        return True

    def _replace(self, events: tuple[CalendarEvent, ...]) -> None:
        self._events = events
        for listener in list(self._listeners):
            listener(self._events)
