"""Tests for plan calendar arithmetic.

Tests that start date derivation:
- Always lands on a Monday
- Puts the last plan week in the race week
- Handles Sunday races (weekday numbering edge case)
- Ignores time-of-day
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from runplanner.core.errors import InvalidInputError
from runplanner.plans.calendar import date_for, format_date, parse_date, start_date_for, week_dates


def test_start_date_for_saturday_race() -> None:
    """Test a 12-week plan ending on a Saturday."""
    assert start_date_for(date(2025, 4, 12), 12) == date(2025, 1, 20)


def test_start_date_for_monday_race() -> None:
    """Test that a Monday race keeps its own Monday as the final week start."""
    assert start_date_for(date(2025, 5, 5), 4) == date(2025, 4, 14)


def test_start_date_for_sunday_race() -> None:
    """Test that a Sunday race belongs to the week starting six days earlier."""
    # 2025-06-15 is a Sunday
    assert start_date_for(date(2025, 6, 15), 1) == date(2025, 6, 9)
    assert start_date_for(date(2025, 6, 15), 8) == date(2025, 4, 21)


@pytest.mark.parametrize("weeks", [1, 2, 6, 12, 16, 52])
def test_start_date_is_monday_and_final_week_contains_race(weeks: int) -> None:
    """Test the start date invariant for every weekday of a race week."""
    for offset in range(7):
        end_date = date(2025, 9, 1) + timedelta(days=offset)
        start = start_date_for(end_date, weeks)
        assert start.weekday() == 0
        final_monday = start + timedelta(days=(weeks - 1) * 7)
        assert final_monday <= end_date < final_monday + timedelta(days=7)


def test_start_date_for_strips_time_of_day() -> None:
    """Test that datetimes are truncated to their (UTC) date."""
    assert start_date_for(datetime(2025, 4, 12, 18, 30), 12) == date(2025, 1, 20)
    # 2025-04-13 01:00 at UTC+2 is still Saturday 2025-04-12 in UTC
    aware = datetime(2025, 4, 13, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    assert start_date_for(aware, 12) == date(2025, 1, 20)


def test_date_for_offsets() -> None:
    """Test week/day offset arithmetic."""
    start = date(2025, 1, 20)
    assert date_for(start, 1, 1) == date(2025, 1, 20)
    assert date_for(start, 1, 7) == date(2025, 1, 26)
    assert date_for(start, 2, 1) == date(2025, 1, 27)
    assert date_for(start, 12, 6) == date(2025, 4, 12)


def test_week_dates_are_monday_to_sunday() -> None:
    """Test that a week has seven consecutive dates."""
    days = week_dates(date(2025, 1, 20), 3)
    assert days[0] == date(2025, 2, 3)
    assert days[-1] == date(2025, 2, 9)
    assert len(days) == 7


def test_parse_and_format_date() -> None:
    """Test the YYYY-MM-DD wire format."""
    assert parse_date("2025-04-12") == date(2025, 4, 12)
    assert format_date(date(2025, 1, 5)) == "2025-01-05"


@pytest.mark.parametrize("text", ["12/04/2025", "2025-13-01", "", "tomorrow"])
def test_parse_date_rejects_malformed(text: str) -> None:
    """Test that malformed dates are reported as invalid input."""
    with pytest.raises(InvalidInputError, match="YYYY-MM-DD"):
        parse_date(text)
