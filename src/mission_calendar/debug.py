"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from mission_calendar.dates import add_days, days_between
from mission_calendar.types import event_label

_LABEL_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def show_week(layout: "WeekLayout") -> str:  # noqa: F821
    """Print ASCII lanes for one week.

    Each row is one slot, each day is 4 characters. Items are lettered in
    placement order; '<' / '>' mark continuation past the week's edges.
    Returns the string and also prints to stdout.
    """
    lines: list[str] = []
    cell = 4

    header = "".join(
        f"{add_days(layout.week_start, i).strftime('%a')[:3]:<{cell}s}" for i in range(7)
    )
    lines.append(f"{'':>8s}  {header}")

    labels: dict[str, str] = {}
    for item in layout.placed_items:
        labels[item.event.id] = _LABEL_CHARS[len(labels) % len(_LABEL_CHARS)]

    for slot in range(layout.total_slots):
        row = list("." * (7 * cell))
        for item in layout.items_in_slot(slot):
            begin = (item.col - 1) * cell
            end = (item.end_col - 1) * cell
            for i in range(begin, end):
                row[i] = labels[item.event.id]
            if item.continues_before:
                row[begin] = "<"
            if item.continues_after:
                row[end - 1] = ">"
        lines.append(f"{'slot ' + str(slot):>8s}  {''.join(row)}")

    if labels:
        legend = [f"{v}={k}" for k, v in labels.items()]
        lines.append(f"\nLegend: {', '.join(legend)}")

    result = "\n".join(lines)
    print(result)
    return result


def show_timeline(layout: "TimelineLayout") -> str:  # noqa: F821
    """Print ASCII rows for the timeline board, one char per day.

    Group headers separate the rows; only visible events appear.
    Returns the string and also prints to stdout.
    """
    lines: list[str] = []
    days = days_between(layout.window_start, layout.window_end) + 1
    lines.append(
        f"{layout.window_start.isoformat()} .. {layout.window_end.isoformat()} "
        f"({days} days)"
    )

    for group, members in layout.groups.items():
        if not members:
            continue
        lines.append(f"[{event_label(group)}]")
        for event in members:
            row = list("." * days)
            first = max(0, days_between(layout.window_start, event.start_date))
            last = min(days - 1, days_between(layout.window_start, event.end_date))
            for i in range(first, last + 1):
                row[i] = "#"
            coord = layout.coordinates[event.id]
            lines.append(
                f"  {event.title[:20]:<20s} {''.join(row)}  y={coord.y:g}"
            )

    result = "\n".join(lines)
    print(result)
    return result
