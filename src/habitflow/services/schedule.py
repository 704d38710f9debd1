"""Recurrence rules: decide whether a habit is due on a calendar date."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from ..models.habit import Habit, HabitFrequency
from .dates import as_calendar_date, local_today, sunday_weekday


def coerce_frequency(value: object) -> Optional[HabitFrequency]:
    """Map a stored frequency onto the enum, or None when it is not recognised."""

    if isinstance(value, HabitFrequency):
        return value
    if not isinstance(value, str):
        return None
    try:
        return HabitFrequency(value.strip().lower())
    except ValueError:
        return None


def _custom_weekdays(raw: object) -> frozenset[int]:
    """Valid weekday indices from ``custom_days``; anything malformed is dropped."""

    if not raw:
        return frozenset()
    try:
        items = list(raw)  # type: ignore[call-overload]
    except TypeError:
        return frozenset()
    return frozenset(
        item for item in items if isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 6
    )


def is_due_on(habit: Habit, day: date | datetime) -> bool:
    """Return True when ``habit`` is scheduled on ``day``.

    Daily and weekly habits are due every day; weekly habits may be completed on
    any day of the week. Custom habits are due on their listed weekdays only.
    Unknown frequencies are never due.
    """

    frequency = coerce_frequency(habit.frequency)
    if frequency is HabitFrequency.DAILY:
        return True
    if frequency is HabitFrequency.WEEKLY:
        return True
    if frequency is HabitFrequency.CUSTOM:
        return sunday_weekday(as_calendar_date(day)) in _custom_weekdays(habit.custom_days)
    return False


def todays_habits(habits: Iterable[Habit], *, today: date | datetime | None = None) -> list[Habit]:
    """Non-archived habits that are due today, in input order."""

    day = local_today(today)
    return [habit for habit in habits if not habit.is_archived and is_due_on(habit, day)]


__all__ = ["coerce_frequency", "is_due_on", "todays_habits"]
