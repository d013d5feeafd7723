"""
Turns the raw query date into the UTC day window used to load slots.
"""

import re

import pendulum

from .exceptions import InvalidDateFormat
from .models import TimeRange

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def normalize_date(raw_date: str) -> TimeRange:
    """
    Parse a ``YYYY-MM-DD`` string into the half-open UTC day window
    ``[00:00 UTC, 00:00 UTC next day)``.

    Raises:
        InvalidDateFormat: If the string does not match the pattern or does
            not name a real calendar day (e.g. 2024-02-30).
    """
    if not isinstance(raw_date, str) or not DATE_PATTERN.fullmatch(raw_date):
        raise InvalidDateFormat(f"Invalid date format: {raw_date!r} (expected YYYY-MM-DD)")

    try:
        start = pendulum.from_format(raw_date, "YYYY-MM-DD", tz="UTC").start_of("day")
    except ValueError as exc:
        raise InvalidDateFormat(f"Invalid calendar date: {raw_date!r}") from exc

    return TimeRange(start=start, end=start.add(days=1))
