"""Input validation for event payloads and timeline metrics."""

from __future__ import annotations

from datetime import date

from mission_calendar.dates import normalize_date
from mission_calendar.types import EVENT_TYPES, PRIORITIES, STATUSES, STICKERS

_REQUIRED_EVENT_KEYS = ("id", "title", "assignee", "startDate", "endDate", "type")

METRIC_KEYS = (
    "day_width",
    "row_height",
    "group_header_height",
    "grid_header_height",
    "sidebar_width",
    "card_margin",
)


def _parse_date(value, field: str, errors: list[str]) -> date | None:
    try:
        if isinstance(value, date):
            return normalize_date(value, field)
        return date.fromisoformat(value[:10])
    except (ValueError, TypeError) as e:
        errors.append(f"{field}: invalid date {value!r} - {e}")
        return None


def validate_event(payload: dict) -> list[str]:
    """Validate one event payload as the store sends it. Returns list of
    error messages (empty = valid).

    Checks:
    - Required keys are present
    - startDate / endDate parse as ISO dates and endDate >= startDate
    - type, status, priority are known values
    - stickers are known and not repeated
    - linkedEventIds is a list of strings
    """
    errors: list[str] = []

    for key in _REQUIRED_EVENT_KEYS:
        if key not in payload:
            errors.append(f"missing {key!r}")
    if errors:
        return errors

    start = _parse_date(payload["startDate"], "startDate", errors)
    end = _parse_date(payload["endDate"], "endDate", errors)
    if start is not None and end is not None and end < start:
        errors.append(
            f"endDate {end.isoformat()} is before startDate {start.isoformat()}"
        )

    if payload["type"] not in EVENT_TYPES:
        errors.append(f"unknown type {payload['type']!r}")
    if "status" in payload and payload["status"] not in STATUSES:
        errors.append(f"unknown status {payload['status']!r}")
    if "priority" in payload and payload["priority"] not in PRIORITIES:
        errors.append(f"unknown priority {payload['priority']!r}")

    stickers = payload.get("stickers") or []
    if not isinstance(stickers, list):
        errors.append("stickers must be a list")
        stickers = []
    seen: set[str] = set()
    for sticker in stickers:
        if sticker not in STICKERS:
            errors.append(f"unknown sticker {sticker!r}")
        elif sticker in seen:
            errors.append(f"duplicate sticker {sticker!r}")
        else:
            seen.add(sticker)

    links = payload.get("linkedEventIds")
    if links is not None:
        if not isinstance(links, list):
            errors.append("linkedEventIds must be a list")
        elif not all(isinstance(x, str) for x in links):
            errors.append("linkedEventIds entries must be strings")

    return errors


def validate_metrics(metrics: dict) -> list[str]:
    """Validate a timeline metrics override. Returns list of error messages.

    Every known key must be a non-negative number; day_width and row_height
    must be positive. Unknown keys are reported.
    """
    errors: list[str] = []

    for key, value in metrics.items():
        if key not in METRIC_KEYS:
            errors.append(f"unknown metric {key!r}")
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"{key}: expected a number, got {value!r}")
            continue
        if value < 0:
            errors.append(f"{key}: must be >= 0, got {value}")
        elif value == 0 and key in ("day_width", "row_height"):
            errors.append(f"{key}: must be > 0")

    return errors
