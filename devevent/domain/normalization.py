"""Canonicalization of user-supplied event titles, dates and times.

Pure functions with no persistence dependencies. The repositories call them
explicitly before an insert; nothing here knows about sessions or tables.
"""

import re
from datetime import datetime
from typing import Any, Collection, Optional

from dateutil import parser as date_parser

from devevent.domain.errors import (
    InvalidDateFormatError,
    InvalidTimeFormatError,
    InvalidTimeValuesError,
)

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")
_TIME = re.compile(r"^(\d{1,2}):(\d{2})(\s*(AM|PM))?$", re.IGNORECASE | re.ASCII)

# Two defaults that differ in year, month and day; a date part taken from the
# input is the same under both.
_DATE_DEFAULTS = (datetime(2000, 1, 1), datetime(2004, 12, 28))


def generate_slug(title: str) -> str:
    """Turn a title into a URL-safe slug.

    >>> generate_slug("Hello, World!!! 2024")
    'hello-world-2024'
    """
    slug = title.lower().strip()
    slug = _SLUG_STRIP.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def normalize_date(value: str) -> str:
    """Parse any reasonable date string and return its ``YYYY-MM-DD`` form.

    Parts the input leaves out come from a fixed default, so "March 2024" is
    always 2024-03-01. Input with no year, month or day at all ("10:30") is
    rejected. Time-of-day and UTC offset are dropped without converting to
    UTC: "2024-03-05T23:30-05:00" stays 2024-03-05.
    """
    try:
        first, second = [date_parser.parse(value, default=d) for d in _DATE_DEFAULTS]
    except (ValueError, OverflowError, TypeError) as exc:
        raise InvalidDateFormatError(value) from exc

    if (
        first.year != second.year
        and first.month != second.month
        and first.day != second.day
    ):
        raise InvalidDateFormatError(value)
    return first.date().isoformat()


def normalize_time(value: str) -> str:
    """Convert ``H:MM``/``HH:MM`` with optional AM/PM into 24-hour ``HH:MM``."""
    match = _TIME.match(value.strip())
    if not match:
        raise InvalidTimeFormatError(value)

    hours = int(match.group(1))
    minutes = match.group(2)
    period = (match.group(4) or "").upper()

    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0

    # "13:00 PM" lands here as hour 25
    if not 0 <= hours <= 23 or not 0 <= int(minutes) <= 59:
        raise InvalidTimeValuesError(value)

    return f"{hours:02d}:{minutes}"


def normalize_event_fields(
    values: dict[str, Any],
    changed: Optional[Collection[str]] = None,
) -> dict[str, Any]:
    """Apply the pre-persist normalization to an event's field values.

    ``changed=None`` means the record is new. Otherwise only the fields named
    in ``changed`` are re-derived, so unrelated updates leave the stored
    slug/date/time alone. Returns a new dict.
    """
    is_new = changed is None
    changed = set(changed or ())
    result = dict(values)

    if is_new or "title" in changed:
        result["slug"] = generate_slug(result["title"])
    if is_new or "date" in changed:
        result["date"] = normalize_date(result["date"])
    if is_new or "time" in changed:
        result["time"] = normalize_time(result["time"])

    return result


def requires_event_check(changed: Optional[Collection[str]] = None) -> bool:
    """Whether a booking write must re-verify that its event exists."""
    return changed is None or "event_id" in changed
