"""Boundary: day-granularity date arithmetic.

Every engine in this package works on whole days. Datetimes are accepted at
the boundary and truncated to their date; timezone-aware values are rejected.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

SUNDAY = 6
MONDAY = 0


def _reject_aware(dt: datetime, name: str) -> None:
    """Reject timezone-aware datetimes."""
    if dt.tzinfo is not None:
        raise TypeError(
            f"{name} must be a naive datetime (no tzinfo), "
            f"got tzinfo={dt.tzinfo!r}. "
            f"All dates are assumed to be in store local time."
        )


def normalize_date(value: date | datetime, name: str = "value") -> date:
    """Truncate a date or naive datetime to day granularity.

    Raises TypeError for aware datetimes and for non-date values.
    """
    if isinstance(value, datetime):
        _reject_aware(value, name)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"{name} must be a date or datetime, got {type(value).__name__}")


def days_between(start: date, end: date) -> int:
    """Signed calendar-day count from start to end (end - start)."""
    return (end - start).days


def add_days(d: date, n: int) -> date:
    return d + timedelta(days=n)


def start_of_week(d: date, week_start: int = SUNDAY) -> date:
    """The first day of the week containing d.

    week_start uses date.weekday() numbering (Monday=0 ... Sunday=6).
    """
    offset = (d.weekday() - week_start) % 7
    return d - timedelta(days=offset)


def end_of_week(d: date, week_start: int = SUNDAY) -> date:
    """The last day (inclusive) of the week containing d."""
    return start_of_week(d, week_start) + timedelta(days=6)


def month_weeks(current: date, week_start: int = SUNDAY) -> list[list[date]]:
    """Rows of the month grid covering current's month.

    Starts on the week_start day on/before the 1st, ends on the last day of
    the week containing the month's final day. Each row holds 7 dates.
    """
    first = current.replace(day=1)
    if first.month == 12:
        last = first.replace(year=first.year + 1, month=1) - timedelta(days=1)
    else:
        last = first.replace(month=first.month + 1) - timedelta(days=1)

    day = start_of_week(first, week_start)
    grid_end = end_of_week(last, week_start)

    weeks: list[list[date]] = []
    while day <= grid_end:
        weeks.append([day + timedelta(days=i) for i in range(7)])
        day += timedelta(days=7)
    return weeks
