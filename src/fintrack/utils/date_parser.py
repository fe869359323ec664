"""Date parsing utilities."""

from calendar import monthrange
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2025-01-15", "15 Jan 2025") and the relative
    words "today", "yesterday", "tomorrow" as well as "this month",
    "last month", "this year", "last year", "this week" and "last week",
    which resolve to the first day of that period.

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith(("this ", "last ")):
        period = date_str.replace(" ", "-")
        if period in PERIODS:
            return get_date_range(period)[0]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Current periods end today; previous periods cover the whole period.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)
    if period == "this-year":
        return (today.replace(month=1, day=1), today)
    if period == "this-week":
        return (today - timedelta(days=today.weekday()), today)
    if period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        return (start_date, today.replace(day=1) - timedelta(days=1))
    if period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return (start_date, today.replace(month=1, day=1) - timedelta(days=1))
    if period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")


def month_key(value: date) -> str:
    """Return the YYYY-MM grouping key for a date."""
    return f"{value.year:04d}-{value.month:02d}"


def month_range(key: str) -> tuple[date, date]:
    """Return first and last day for a YYYY-MM month key.

    Raises:
        ValueError: If the key is not a valid month
    """
    try:
        year_str, month_str = key.strip().split("-")
        year, month = int(year_str), int(month_str)
        start = date(year, month, 1)
    except ValueError:
        raise ValueError(f"Invalid month '{key}': expected YYYY-MM")
    return (start, date(year, month, monthrange(year, month)[1]))
