"""
Calendar and duration helpers used by the planner and the review tracker.

Rounding follows the "half up" convention (2.5 -> 3, 0.25 -> 0.5) rather
than Python's round-half-to-even.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from datetime import date, datetime, time, timedelta

SECONDS_PER_DAY = 24 * 60 * 60


def as_date(value: date | datetime) -> date:
    """Return the calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """
    Number of whole days spanned between two moments, rounded up.

    The order of the arguments does not matter.
    """
    if isinstance(start, datetime) != isinstance(end, datetime):
        start, end = as_date(start), as_date(end)
    seconds = abs((end - start).total_seconds())
    return math.ceil(seconds / SECONDS_PER_DAY)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def add_days(moment: datetime, days: int) -> datetime:
    return moment + timedelta(days=days)


def at_hour(day: date, hour: int) -> datetime:
    """Datetime for `day` at the given hour, clamped to the same day."""
    return datetime.combine(day, time(hour=max(0, min(hour, 23))))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round_to_half_hour(hours: float) -> float:
    """Round a duration to the nearest 0.5 hour."""
    return math.floor(hours * 2 + 0.5) / 2
