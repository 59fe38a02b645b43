"""Tests for day-granularity date helpers.

Test data loaded from: data/fixtures/scenarios/weekly.json (month_weeks)
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import day, load_scenarios

_data = load_scenarios("weekly")


class TestNormalizeDate:

    def test_date_passthrough(self):
        from mission_calendar.dates import normalize_date

        assert normalize_date(date(2025, 6, 1)) == date(2025, 6, 1)

    def test_datetime_truncated(self):
        from mission_calendar.dates import normalize_date

        assert normalize_date(datetime(2025, 6, 1, 23, 59)) == date(2025, 6, 1)

    def test_aware_rejected(self):
        from mission_calendar.dates import normalize_date

        with pytest.raises(TypeError, match="naive"):
            normalize_date(datetime(2025, 6, 1, tzinfo=timezone(timedelta(hours=2))))

    def test_string_rejected(self):
        from mission_calendar.dates import normalize_date

        with pytest.raises(TypeError):
            normalize_date("2025-06-01")  # type: ignore[arg-type]


class TestArithmetic:

    def test_days_between_is_signed(self):
        from mission_calendar.dates import days_between

        assert days_between(day("sun"), day("wed")) == 3
        assert days_between(day("wed"), day("sun")) == -3

    def test_add_days(self):
        from mission_calendar.dates import add_days

        assert add_days(day("sat"), 1) == day("next_sun")
        assert add_days(day("sun"), -1) == date(2025, 5, 31)

    @pytest.mark.parametrize("name", ["sun", "mon", "wed", "sat"])
    def test_start_of_week_is_sunday(self, name):
        from mission_calendar.dates import start_of_week

        assert start_of_week(day(name)) == day("sun")

    def test_start_of_week_monday(self):
        from mission_calendar.dates import MONDAY, start_of_week

        assert start_of_week(day("sun"), MONDAY) == date(2025, 5, 26)
        assert start_of_week(day("wed"), MONDAY) == day("mon")


class TestMonthWeeks:

    @pytest.mark.parametrize("spec", _data["month_weeks"], ids=lambda s: s["id"])
    def test_grid_bounds(self, spec):
        from mission_calendar.dates import month_weeks

        weeks = month_weeks(date.fromisoformat(spec["current"]))
        assert len(weeks) == spec["expected_rows"]
        assert weeks[0][0] == date.fromisoformat(spec["first"])
        assert weeks[-1][-1] == date.fromisoformat(spec["last"])

    def test_rows_are_contiguous_weeks(self):
        from mission_calendar.dates import month_weeks

        weeks = month_weeks(date(2025, 6, 18))
        flat = [d for week in weeks for d in week]
        assert all(len(week) == 7 for week in weeks)
        assert all(b - a == timedelta(days=1) for a, b in zip(flat, flat[1:]))
        assert all(week[0].weekday() == 6 for week in weeks)
