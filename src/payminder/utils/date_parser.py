"""Date parsing utilities."""

import math
import re
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_IN_N_DAYS = re.compile(r"^in (\d+) (day|days|week|weeks|month|months)$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a due date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "tomorrow", "next friday", "next month",
      "in 10 days", "in 2 weeks"

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if not date_str:
        raise ValueError("Empty date string")
    if today is None:
        today = date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    match = _IN_N_DAYS.match(date_str)
    if match:
        count = int(match.group(1))
        unit = match.group(2)
        if unit.startswith("day"):
            return today + timedelta(days=count)
        if unit.startswith("week"):
            return today + timedelta(weeks=count)
        return today + relativedelta(months=count)

    if date_str.startswith("next "):
        period = date_str[5:]
        if period == "week":
            # Monday of next week
            return today + timedelta(days=(7 - today.weekday()))
        elif period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)
        elif period in WEEKDAYS:
            target_day = WEEKDAYS.index(period)
            days_ahead = (target_day - today.weekday()) % 7
            if days_ahead == 0:
                days_ahead = 7
            return today + timedelta(days=days_ahead)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def start_of_day(value: datetime | date) -> datetime:
    """Truncate a date or datetime to local midnight."""
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime(value.year, value.month, value.day)


def days_until_due(due_date: date, now: datetime | date) -> int:
    """Whole days from today's midnight to the due date's midnight.

    Negative when the due date has passed, 0 on the due day.
    """
    due = start_of_day(due_date)
    today = start_of_day(now).replace(tzinfo=None)
    return math.ceil((due - today) / timedelta(days=1))
