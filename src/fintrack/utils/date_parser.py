"""Date parsing utilities."""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

# Tried in order; the first format that yields a valid calendar date wins.
STATEMENT_DATE_FORMATS = ("%m/%d/%Y", "%d/%m/%Y", "%Y-%m-%d", "%m-%d-%Y")

NAMED_DATE_RANGES = ("last-30-days", "this-month", "last-month", "this-year", "custom")


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024", ...) and the
    relative words "today", "yesterday" and "tomorrow".

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

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_statement_date(date_str: Optional[str]) -> Optional[date]:
    """Parse a date as it appears in a bank or card statement.

    Tries MM/DD/YYYY, DD/MM/YYYY, YYYY-MM-DD and MM-DD-YYYY, then falls back
    to dateutil's lenient parser.

    Returns:
        The parsed date, or None when nothing matches. Callers decide how to
        treat a missing date.
    """
    if not date_str or not date_str.strip():
        return None
    date_str = date_str.strip()

    for fmt in STATEMENT_DATE_FORMATS:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError):
        logger.debug("unparseable statement date %r", date_str)
        return None


def resolve_date_range(
    date_range: Optional[str],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> tuple[Optional[date], Optional[date]]:
    """Resolve a named filter range into inclusive (start, end) dates.

    Each explicit bound replaces the matching side of the named range, so
    start_date alone narrows "this-year" to start there. "custom" and None
    use only the explicit bounds.

    Raises:
        ValueError: If the range name is not recognized
    """
    named_start, named_end = _named_range(date_range, today or date.today())
    return (
        start_date if start_date is not None else named_start,
        end_date if end_date is not None else named_end,
    )


def _named_range(
    date_range: Optional[str], today: date
) -> tuple[Optional[date], Optional[date]]:
    if date_range is None or date_range == "custom":
        return (None, None)

    if date_range == "last-30-days":
        return (today - timedelta(days=30), today)

    if date_range == "this-month":
        return (today.replace(day=1), today)

    if date_range == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
        end = today.replace(day=1) - timedelta(days=1)
        return (start, end)

    if date_range == "this-year":
        return (today.replace(month=1, day=1), today)

    raise ValueError(
        f"Unknown date range: '{date_range}'. Supported ranges: {', '.join(NAMED_DATE_RANGES)}"
    )


def relative_period(time_range: Optional[str]) -> relativedelta:
    """Return the length of a relative window.

    week is 7 days, month one calendar month, year one calendar year; any
    other value (including None) is 30 days.
    """
    if time_range == "week":
        return relativedelta(days=7)
    if time_range == "month":
        return relativedelta(months=1)
    if time_range == "year":
        return relativedelta(years=1)
    return relativedelta(days=30)


def relative_window(
    time_range: Optional[str], today: Optional[date] = None
) -> tuple[date, date]:
    """Return the half-open window [start, end) ending with today."""
    today = today or date.today()
    end = today + timedelta(days=1)
    return (end - relative_period(time_range), end)


def previous_window(time_range: Optional[str], current_start: date) -> tuple[date, date]:
    """Return the window of the same length immediately before current_start."""
    return (current_start - relative_period(time_range), current_start)
