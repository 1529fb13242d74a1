"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "tomorrow", "next week", "next friday", etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to the current date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "week":
            return today - timedelta(days=today.weekday() + 7)
        elif period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7
            return today - timedelta(days=days_ago or 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "week":
            return today - timedelta(days=today.weekday())
        elif period == "month":
            return today.replace(day=1)

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "week":
            return today + timedelta(days=(7 - today.weekday()))
        elif period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period in WEEKDAYS:
            days_ahead = (WEEKDAYS.index(period) - today.weekday()) % 7
            return today + timedelta(days=days_ahead or 7)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_datetime(value: str) -> datetime:
    """Parse a date-time string such as "2024-01-15 18:30" or an ISO instant.

    Raises:
        ValueError: If the string cannot be parsed
    """
    try:
        return date_parser.parse(value.strip())
    except (ValueError, TypeError) as e:
        raise ValueError(f"Could not parse date/time '{value}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates (inclusive) for a calendar period.

    Args:
        period: One of this-week, next-week, this-month, next-month
        today: Reference date (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "this-week":
        start_date = today - timedelta(days=today.weekday())
        return (start_date, start_date + timedelta(days=6))

    elif period == "next-week":
        start_date = today - timedelta(days=today.weekday()) + timedelta(weeks=1)
        return (start_date, start_date + timedelta(days=6))

    elif period == "this-month":
        start_date = today.replace(day=1)
        end_date = start_date + relativedelta(months=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "next-month":
        start_date = (today + relativedelta(months=1)).replace(day=1)
        end_date = start_date + relativedelta(months=1) - timedelta(days=1)
        return (start_date, end_date)

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-week, next-week, this-month, next-month"
        )
