#!/usr/bin/env python
"""Visual verification report for mission-calendar.

Run:  uv run python scripts/verify.py

Produces a formatted report showing:
  1. Reference data (week start, day table) and the sample board
  2. Weekly lanes  -- scenario tables + ASCII weeks
  3. Timeline board  -- coordinates, visibility, ASCII board
  4. Links and conflicts  -- connectors, ghost stubs, paradox proposals
  5. Drag translation  -- pixel offset to day delta
"""

from __future__ import annotations

import json
import sys
from datetime import date, datetime
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths and data loading
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "data" / "fixtures"
SCENARIOS = FIXTURES / "scenarios"

sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT / "tests"))

from conftest import events_from_spec
from mission_calendar.conflict import find_conflicts
from mission_calendar.debug import show_timeline, show_week
from mission_calendar.drag import day_delta
from mission_calendar.links import render_links
from mission_calendar.loaders import load_events_json
from mission_calendar.timeline import layout_timeline
from mission_calendar.weekly import layout_week


def _load(path: Path):
    with open(path) as f:
        return json.load(f)


_ref = _load(FIXTURES / "reference.json")
BOARD = load_events_json(FIXTURES / "events.json")
WEEK_START = date.fromisoformat(_ref["week_start"])

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
WIDTH = 90


def banner(title: str):
    print()
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def heading(title: str):
    print()
    print(f"  {title}")
    print(f"  {'-' * (len(title) + 2)}")


def table(headers: list[str], rows: list[list[str]], indent: int = 4):
    """Print a formatted table with auto-sized columns."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    pad = " " * indent
    fmt = pad + "  ".join(f"{{:<{w}}}" for w in col_widths)
    sep = pad + "  ".join("-" * w for w in col_widths)

    print(fmt.format(*headers))
    print(sep)
    for row in rows:
        padded = row + [""] * (len(headers) - len(row))
        print(fmt.format(*padded))


def _ok(flag: bool) -> str:
    return "OK" if flag else "FAIL"


# ---------------------------------------------------------------------------
# Section 1: Reference data
# ---------------------------------------------------------------------------
def section_reference():
    banner("REFERENCE DATA")
    print(f"\n    Week start:     {WEEK_START.strftime('%A %Y-%m-%d')}")
    print(f"    Timeline days:  {_ref['timeline_days']}")

    heading("Day Mapping")
    rows = [
        [d["name"], d["date"], date.fromisoformat(d["date"]).strftime("%a")]
        for d in _ref["days"]
    ]
    table(["Name", "Date", "Day"], rows)

    heading("Sample Board (data/fixtures/events.json)")
    rows = [
        [e.id, e.type, e.start_date.isoformat(), e.end_date.isoformat(),
         ", ".join(e.linked_event_ids) or "-"]
        for e in BOARD
    ]
    table(["ID", "Type", "Start", "End", "Depends on"], rows)


# ---------------------------------------------------------------------------
# Section 2: Weekly lanes
# ---------------------------------------------------------------------------
def section_weekly():
    banner("LAYER 1: WEEKLY LANES")

    heading("Function: layout_week(week_start, events) -> WeekLayout")
    print("    Clips to the week, sorts by (col, -span, id), first-fit into slots.\n")
    data = _load(SCENARIOS / "weekly.json")
    rows = []
    for s in data["layout_week"]:
        layout = layout_week(date.fromisoformat(s["week_start"]), events_from_spec(s["events"]))
        placed = {i.event.id: (i.col, i.span, i.slot) for i in layout.placed_items}
        expected = {k: (v["col"], v["span"], v["slot"]) for k, v in s["expected"].items()}
        rows.append([
            s["id"], str(layout.total_slots), str(s["expected_slots"]),
            _ok(placed == expected and layout.total_slots == s["expected_slots"]),
            s["notes"],
        ])
    table(["ID", "Slots", "Expected", "", "Notes"], rows)

    heading(f"Board Week of {WEEK_START.isoformat()}")
    print()
    show_week(layout_week(WEEK_START, BOARD))


# ---------------------------------------------------------------------------
# Section 3: Timeline board
# ---------------------------------------------------------------------------
def section_timeline():
    banner("LAYER 1: TIMELINE BOARD")

    data = _load(SCENARIOS / "timeline.json")["board"]
    layout = layout_timeline(
        date.fromisoformat(data["window_start"]), data["window_days"], BOARD
    )

    heading("Function: layout_timeline(start, days, events) -> TimelineLayout")
    rows = []
    for event in BOARD:
        coord = layout.coordinate(event.id)
        exp = data["expected_coordinates"].get(event.id)
        if coord is None:
            rows.append([event.id, "-", "-", "-", _ok(exp is None)])
            continue
        actual = [coord.x_start, coord.x_end, coord.y]
        rows.append([
            event.id, f"{coord.x_start:g}", f"{coord.x_end:g}", f"{coord.y:g}",
            _ok(exp is not None and actual == [exp["x_start"], exp["x_end"], exp["y"]]),
        ])
    table(["ID", "x_start", "x_end", "y", ""], rows)
    print(f"\n    total_height={layout.total_height:g}  board_width={layout.board_width:g}")

    print()
    show_timeline(layout)


# ---------------------------------------------------------------------------
# Section 4: Links and conflicts
# ---------------------------------------------------------------------------
def section_links():
    banner("LAYER 2: LINKS AND CONFLICTS")

    layout = layout_timeline(WEEK_START, _ref["timeline_days"], BOARD)
    render = render_links(BOARD, layout)

    heading("Function: render_links(events, layout) -> LinkRender")
    rows = [[c.key, "full", c.svg_path()] for c in render.connectors]
    rows += [[g.key, "ghost", g.svg_path()] for g in render.ghosts]
    table(["Key", "Kind", "Path"], rows)

    heading("Function: find_conflicts(events) -> [ConflictProposal]")
    rows = [
        [p.source.id, p.target.id, p.safe_date.isoformat(), str(p.shift_amount)]
        for p in find_conflicts(BOARD)
    ]
    table(["Source", "Target", "Safe date", "Shift"], rows)


# ---------------------------------------------------------------------------
# Section 5: Drag translation
# ---------------------------------------------------------------------------
def section_drag():
    banner("LAYER 2: DRAG TRANSLATION")

    heading("Function: day_delta(offset_px, day_width) -> int")
    rows = []
    for s in _load(SCENARIOS / "drag.json")["day_delta"]:
        result = day_delta(s["offset"], s["day_width"])
        rows.append([
            s["id"], f"{s['offset']:g}", f"{s['day_width']:g}",
            str(result), _ok(result == s["expected"]),
        ])
    table(["ID", "Offset", "Width", "Delta", ""], rows)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    banner("MISSION-CALENDAR   --  VISUAL VERIFICATION REPORT")
    print(f"    Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    print(f"    Fixture data: {FIXTURES.relative_to(ROOT)}/")

    section_reference()
    section_weekly()
    section_timeline()
    section_links()
    section_drag()

    banner("END OF REPORT")
    print()


if __name__ == "__main__":
    main()
