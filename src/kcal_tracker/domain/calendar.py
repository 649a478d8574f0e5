"""Day keys under the 04:30 rollover rule."""

import re
from datetime import date, datetime, timedelta

from kcal_tracker.domain.errors import InvalidInputError

ROLLOVER_OFFSET = timedelta(hours=4, minutes=30)

_DAY_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def day_key_from_date(day: date) -> str:
    """Format a date as a zero-padded ``YYYY-MM-DD`` key."""
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_day_key(key: str) -> date:
    """Parse a day key, raising InvalidInputError on a malformed value."""
    if not isinstance(key, str) or not _DAY_KEY_PATTERN.match(key):
        raise InvalidInputError(f"Invalid day key: {key!r}")
    try:
        return date.fromisoformat(key)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid day key: {key!r}") from exc


def current_day_key(now: datetime) -> str:
    """Return the logging day for a local timestamp.

    The logging day runs from 04:30 to 04:29:59 on the next calendar day, so
    food eaten after midnight still counts for the previous day.
    """
    return day_key_from_date((now - ROLLOVER_OFFSET).date())


def previous_day_key(key: str) -> str:
    return day_key_from_date(parse_day_key(key) - timedelta(days=1))


def next_day_key(key: str) -> str:
    return day_key_from_date(parse_day_key(key) + timedelta(days=1))
