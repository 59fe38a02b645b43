"""Data loading utilities for event snapshots and timeline metrics."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from mission_calendar.schema import validate_event, validate_metrics
from mission_calendar.timeline import DESKTOP, MOBILE, TimelineMetrics
from mission_calendar.types import CalendarEvent, EventValidationError

_PRESETS = {"desktop": DESKTOP, "mobile": MOBILE}


def _to_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def event_from_dict(payload: dict) -> CalendarEvent:
    """Build a CalendarEvent from a store payload (camelCase keys).

    Raises EventValidationError if validation fails.
    """
    errors = validate_event(payload)
    if errors:
        raise EventValidationError(payload.get("id"), errors)

    return CalendarEvent(
        id=payload["id"],
        title=payload["title"],
        assignee=payload["assignee"],
        start_date=_to_date(payload["startDate"]),
        end_date=_to_date(payload["endDate"]),
        type=payload["type"],
        status=payload.get("status", "To Do"),
        priority=payload.get("priority", "Medium"),
        team_member_id=payload.get("teamMemberId"),
        assignee_name=payload.get("assigneeName"),
        team_member_name=payload.get("teamMemberName"),
        description=payload.get("description"),
        stickers=tuple(payload.get("stickers") or ()),
        linked_event_ids=tuple(payload.get("linkedEventIds") or ()),
    )


def event_to_dict(event: CalendarEvent) -> dict:
    """Inverse of event_from_dict. Optional fields are omitted when unset."""
    data = {
        "id": event.id,
        "title": event.title,
        "assignee": event.assignee,
        "startDate": event.start_date.isoformat(),
        "endDate": event.end_date.isoformat(),
        "type": event.type,
        "status": event.status,
        "priority": event.priority,
    }
    optional = {
        "teamMemberId": event.team_member_id,
        "assigneeName": event.assignee_name,
        "teamMemberName": event.team_member_name,
        "description": event.description,
    }
    data.update({k: v for k, v in optional.items() if v is not None})
    if event.stickers:
        data["stickers"] = list(event.stickers)
    if event.linked_event_ids:
        data["linkedEventIds"] = list(event.linked_event_ids)
    return data


def load_events_json(path: str | Path) -> list[CalendarEvent]:
    """Load an event snapshot from a JSON file.

    The JSON file must have the store export format:
    {
        "events": [
            { "id": "...", "startDate": "2025-06-01", ... },
            ...
        ]
    }

    Raises ValueError listing every invalid event.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    errors: list[str] = []
    for i, payload in enumerate(data["events"]):
        for e in validate_event(payload):
            errors.append(f"event {payload.get('id', i)!r}: {e}")
    if errors:
        raise ValueError(
            f"Validation errors in {path.name}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    return [event_from_dict(payload) for payload in data["events"]]


def load_metrics_json(path: str | Path) -> TimelineMetrics:
    """Load timeline metrics from a JSON file.

    {
        "base": "desktop",          # optional preset, default desktop
        "metrics": { "day_width": 48, ... }
    }

    Keys missing from "metrics" keep the preset value.
    Raises ValueError if validation fails.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    base_name = data.get("base", "desktop")
    overrides = data.get("metrics", {})

    errors = validate_metrics(overrides)
    if base_name not in _PRESETS:
        errors.append(f"unknown base preset {base_name!r}")
    if errors:
        raise ValueError(
            f"Validation errors in {path.name}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    base = _PRESETS[base_name]
    values = {
        key: overrides.get(key, getattr(base, key))
        for key in TimelineMetrics.__dataclass_fields__
    }
    return TimelineMetrics(**values)
