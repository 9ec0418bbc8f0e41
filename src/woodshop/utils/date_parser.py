"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow"
    - Period starts: "this month", "last month", "next month", "this year",
      "last year", "next year"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates, defaults to date.today()

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # Handle "last/this/next" + month/year
    offsets = {"last": -1, "this": 0, "next": 1}
    parts = date_str.split()
    if len(parts) == 2 and parts[0] in offsets:
        step = offsets[parts[0]]
        if parts[1] == "month":
            return (today + relativedelta(months=step)).replace(day=1)
        if parts[1] == "year":
            return today.replace(month=1, day=1) + relativedelta(years=step)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
