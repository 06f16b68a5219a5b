"""Date parsing utilities."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def _midnight_utc(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def parse_datetime(date_str: str, today: Optional[date] = None) -> datetime:
    """Parse a date string into a timezone aware datetime.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "2024-01-15T10:30:00+02:00", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Relative dates resolve to midnight UTC. Absolute values without an offset
    are taken as UTC.

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to today)

    Returns:
        Timezone aware datetime

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip()
    keyword = date_str.lower()
    today = today or datetime.now(timezone.utc).date()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if keyword in relative_dates:
        return _midnight_utc(relative_dates[keyword])

    if keyword.startswith("last "):
        period = keyword[5:]
        if period == "month":
            return _midnight_utc((today - relativedelta(months=1)).replace(day=1))
        elif period == "year":
            return _midnight_utc(today.replace(month=1, day=1) - relativedelta(years=1))
        elif period == "week":
            return _midnight_utc(today - timedelta(days=today.weekday() + 7))

    elif keyword.startswith("this "):
        period = keyword[5:]
        if period == "month":
            return _midnight_utc(today.replace(day=1))
        elif period == "year":
            return _midnight_utc(today.replace(month=1, day=1))
        elif period == "week":
            return _midnight_utc(today - timedelta(days=today.weekday()))

    try:
        dt = date_parser.parse(date_str)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
