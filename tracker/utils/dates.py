"""
Date helpers.

Dates are stored as 8-digit ``YYYYMMDD`` strings and shown to the user in the
configured display format (``display.date_format``, a strftime pattern).
"""

import datetime as dt
import re

import pandas as pd

from .constants import INTERNAL_DATE_FORMAT, DEFAULT_DISPLAY_DATE_FORMAT

_INTERNAL_RE = re.compile(r'^\d{8}$')


def is_internal_date(value) -> bool:
    if not isinstance(value, str) or not _INTERNAL_RE.match(value):
        return False
    try:
        dt.datetime.strptime(value, INTERNAL_DATE_FORMAT)
        return True
    except ValueError:
        return False


def parse_date(value, display_format=DEFAULT_DISPLAY_DATE_FORMAT):
    """Parse date input with multiple format fallbacks.

    Accepts:
    - ``date`` / ``datetime`` objects
    - internal form: '20240101'
    - the display format: '01/01/2024' for the default '%m/%d/%Y'
    - ISO: '2024-01-01', '2024-01-01T09:00:00'
    - anything else pandas can parse unambiguously

    Returns None for blank input; raises ValueError when nothing matches.
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value

    text = str(value).strip()
    if not text:
        return None

    formats = [INTERNAL_DATE_FORMAT, display_format, '%Y-%m-%d', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%d %H:%M:%S']
    for fmt in formats:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except (ValueError, TypeError):
            continue

    try:
        return pd.to_datetime(text).date()
    except (ValueError, TypeError, OverflowError, pd.errors.ParserError):
        raise ValueError(f"Unrecognized date: {text!r}")


def to_internal_date(value, display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> str:
    """Convert user input (or a date object) to ``YYYYMMDD``; blank stays blank."""
    parsed = parse_date(value, display_format)
    return parsed.strftime(INTERNAL_DATE_FORMAT) if parsed else ''


def to_display_date(value, display_format=DEFAULT_DISPLAY_DATE_FORMAT) -> str:
    """Render an internal date for the user. Unparseable values pass through."""
    if not value:
        return ''
    if not is_internal_date(str(value)):
        return str(value)
    return dt.datetime.strptime(str(value), INTERNAL_DATE_FORMAT).strftime(display_format)


def from_internal(value):
    if not is_internal_date(value):
        return None
    return dt.datetime.strptime(value, INTERNAL_DATE_FORMAT).date()


def today_internal(today=None) -> str:
    return (today or dt.date.today()).strftime(INTERNAL_DATE_FORMAT)


def add_days(value, days: int) -> str:
    base = parse_date(value)
    if base is None:
        raise ValueError("Cannot offset a blank date")
    return (base + dt.timedelta(days=days)).strftime(INTERNAL_DATE_FORMAT)


def week_start(value=None) -> str:
    """Monday of the week containing ``value`` (today when omitted)."""
    day = parse_date(value) if value else dt.date.today()
    return (day - dt.timedelta(days=day.weekday())).strftime(INTERNAL_DATE_FORMAT)


def days_until(value, today=None):
    """Whole days from today to ``value``; None when the date is blank or invalid."""
    target = from_internal(value) if isinstance(value, str) else parse_date(value)
    if target is None:
        return None
    return (target - (today or dt.date.today())).days
