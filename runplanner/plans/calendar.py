"""Plan calendar arithmetic.

Pure date functions mapping a race date and week count onto the plan's
Monday-based week grid. No I/O, no validation of week bounds.
"""

from datetime import date, datetime, timedelta, timezone

from runplanner.core.errors import InvalidInputError

DATE_FORMAT = "%Y-%m-%d"

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def to_date(value: date | datetime) -> date:
    """Strip time-of-day, converting aware datetimes to UTC first."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def start_date_for(end_date: date | datetime, weeks: int) -> date:
    """Return the Monday that begins week 1 of a plan ending in end_date's week.

    Args:
        end_date: Race date (any weekday)
        weeks: Number of plan weeks; callers guarantee weeks >= 1

    Returns:
        Monday of week 1
    """
    day = to_date(end_date)
    # weekday(): Monday=0..Sunday=6
    monday_of_final_week = day - timedelta(days=day.weekday())
    return monday_of_final_week - timedelta(days=(weeks - 1) * 7)


def date_for(start_date: date, week: int, day_of_week: int) -> date:
    """Return the calendar date of a 1-based week and 1-based weekday (1=Monday)."""
    return start_date + timedelta(days=(week - 1) * 7 + (day_of_week - 1))


def week_dates(start_date: date, week: int) -> list[date]:
    """Return the seven dates (Monday..Sunday) of a 1-based plan week."""
    return [date_for(start_date, week, day_of_week) for day_of_week in range(1, 8)]


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD date.

    Raises:
        InvalidInputError: If the text is not a valid YYYY-MM-DD date
    """
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except (ValueError, AttributeError) as e:
        raise InvalidInputError(f"date must be YYYY-MM-DD, got {text!r}") from e


def format_date(day: date | datetime) -> str:
    return to_date(day).strftime(DATE_FORMAT)
