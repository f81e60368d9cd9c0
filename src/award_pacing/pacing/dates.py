"""Date parsing shared by the pace and check-in calculators.

Record dates are plain ``YYYY-MM-DD`` strings. Anything else (empty strings,
other ISO forms, garbage) is treated as missing; callers decide what a
missing date means.
"""

import logging
import re
from datetime import UTC, date, datetime

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

SECONDS_PER_DAY = 86400.0


def parse_date(value: str | None) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` date.

    Args:
        value: Date string from a record.

    Returns:
        Parsed date, or None if the value is empty or malformed.
    """
    if not value:
        return None

    if not _DATE_RE.match(value):
        logger.debug("Ignoring malformed date %r", value)
        return None

    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        logger.debug("Ignoring out-of-range date %r", value)
        return None


def at_midnight(day: date, like: datetime) -> datetime:
    """Midnight of ``day``, aware in UTC if ``like`` is aware, naive otherwise."""
    if like.tzinfo is None:
        return datetime(day.year, day.month, day.day)
    return datetime(day.year, day.month, day.day, tzinfo=UTC)


def parse_date_or(value: str | None, fallback: datetime) -> datetime:
    """Parse a record date, substituting ``fallback`` when it can't be parsed.

    Args:
        value: Date string from a record.
        fallback: Timestamp returned for empty or malformed values.

    Returns:
        Midnight of the parsed date (matching ``fallback``'s awareness), or
        ``fallback`` itself.
    """
    parsed = parse_date(value)
    if parsed is None:
        return fallback
    return at_midnight(parsed, fallback)


def days_between(later: datetime, earlier: datetime) -> float:
    """Fractional days from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_month_day(day: date) -> str:
    """``Mar 4`` style label, independent of the process locale."""
    return f"{MONTH_ABBR[day.month - 1]} {day.day}"


def format_long_date(day: date) -> str:
    """``Mar 4, 2025`` style label."""
    return f"{format_month_day(day)}, {day.year}"
