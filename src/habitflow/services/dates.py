"""Calendar-date helpers shared by the scheduling and analytics services."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator

DAYS_PER_WEEK = 7


def as_calendar_date(value: date | datetime | str) -> date:
    """Strip any time-of-day component and return a plain ``date``.

    ISO strings (``YYYY-MM-DD``, optionally with a time part) are accepted since
    that is how the client stores log dates.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(value.strip()).date()


def local_today(today: date | datetime | None = None) -> date:
    """Return ``today`` as a calendar date, defaulting to the local date."""

    if today is None:
        return date.today()
    return as_calendar_date(today)


def sunday_weekday(day: date) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""

    # date.weekday() is Monday=0 .. Sunday=6
    return (day.weekday() + 1) % DAYS_PER_WEEK


def week_start(today: date) -> date:
    """Most recent Sunday on or before ``today``."""

    return today - timedelta(days=sunday_weekday(today))


def week_window(today: date) -> list[date]:
    """The seven dates from the most recent Sunday through the following Saturday."""

    start = week_start(today)
    return [start + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def walk_back(start: date, limit: int) -> Iterator[date]:
    """Yield ``start`` and the dates before it, at most ``limit`` dates in total."""

    cursor = start
    for _ in range(limit):
        yield cursor
        cursor -= timedelta(days=1)


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from ``earlier`` to ``later``."""

    return (later - earlier).days


__all__ = [
    "DAYS_PER_WEEK",
    "as_calendar_date",
    "days_between",
    "local_today",
    "sunday_weekday",
    "walk_back",
    "week_start",
    "week_window",
]
