"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

DEFAULT_VALIDITY_DAYS = 30

_RELATIVE_OFFSET = re.compile(r"^(?:in\s+|\+)(\d+)\s*(day|days|d|week|weeks|w|month|months|m)$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "tomorrow", "next month", "end of month"
    - Offsets from today: "in 30 days", "+2 weeks", "+1 month"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "next week": today + timedelta(days=(7 - today.weekday())),
        "next month": (today + relativedelta(months=1)).replace(day=1),
        "end of month": (today + relativedelta(months=1)).replace(day=1) - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    match = _RELATIVE_OFFSET.match(date_str)
    if match:
        count = int(match.group(1))
        unit = match.group(2)
        if unit.startswith("d"):
            return today + timedelta(days=count)
        elif unit.startswith("w"):
            return today + timedelta(weeks=count)
        return today + relativedelta(months=count)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def coerce_date(value: Any) -> Optional[date]:
    """Convert a spreadsheet cell or string to a date, or None if it is not one."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        # ISO dates and timestamps, as written into stored snapshots
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return parse_date(text)
    except ValueError:
        return None


def default_valid_until(issue_date: date, days: int = DEFAULT_VALIDITY_DAYS) -> date:
    """Return the default validity date for a document issued on issue_date."""
    return issue_date + timedelta(days=days)
