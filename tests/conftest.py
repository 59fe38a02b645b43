"""Shared test fixtures and data loading for mission-calendar.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Reference week: Sun 2025-06-01 through Sat 2025-06-07 (columns 1-7).
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"
EVENTS_FILE = FIXTURES_DIR / "events.json"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_reference = _load_json(FIXTURES_DIR / "reference.json")


# ---------------------------------------------------------------------------
# Reference constants derived from reference.json
# ---------------------------------------------------------------------------
WEEK_START = date.fromisoformat(_reference["week_start"])
TIMELINE_DAYS = _reference["timeline_days"]

# Day lookup:  DAYS["wed"] → date(2025, 6, 4)
DAYS: dict[str, date] = {
    d["name"]: date.fromisoformat(d["date"]) for d in _reference["days"]
}


def day(name: str) -> date:
    """Date for a named day of the reference week."""
    return DAYS[name]


# ---------------------------------------------------------------------------
# Event factory
# ---------------------------------------------------------------------------
def make_event(
    event_id: str,
    start: str | date,
    end: str | date,
    type: str = "Training",
    links: tuple[str, ...] = (),
    **kwargs,
):
    """Build a CalendarEvent with defaults for the fields tests don't care about."""
    from mission_calendar.types import CalendarEvent

    if isinstance(start, str):
        start = date.fromisoformat(start)
    if isinstance(end, str):
        end = date.fromisoformat(end)
    kwargs.setdefault("title", f"Mission {event_id}")
    kwargs.setdefault("assignee", "lead-test")
    return CalendarEvent(
        id=event_id,
        start_date=start,
        end_date=end,
        type=type,
        linked_event_ids=tuple(links),
        **kwargs,
    )


def events_from_spec(specs: list[dict]):
    """Build events from compact scenario dicts: {id, start, end, [type], [links]}."""
    return [
        make_event(
            s["id"], s["start"], s["end"],
            type=s.get("type", "Training"),
            links=tuple(s.get("links", ())),
        )
        for s in specs
    ]


def board_events():
    """The sample board from data/fixtures/events.json."""
    from mission_calendar.loaders import load_events_json

    return load_events_json(EVENTS_FILE)


# ---------------------------------------------------------------------------
# Scenario loader
# ---------------------------------------------------------------------------
def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def week_start() -> date:
    return WEEK_START


@pytest.fixture
def events():
    return board_events()


@pytest.fixture
def store(events):
    from mission_calendar.store import InMemoryEventStore

    return InMemoryEventStore(events)


@pytest.fixture
def session(store):
    from mission_calendar.session import CalendarSession

    s = CalendarSession(store)
    yield s
    s.close()


@pytest.fixture
def paradox_store():
    """A (Jun 1-5) and B (Jun 3-4), not yet linked."""
    from mission_calendar.store import InMemoryEventStore

    return InMemoryEventStore([
        make_event("A", "2025-06-01", "2025-06-05"),
        make_event("B", "2025-06-03", "2025-06-04", type="Goal"),
    ])
