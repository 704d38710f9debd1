"""Marking and unmarking habit completions."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from ..logging_config import get_logger
from ..models.habit import Habit, HabitLog
from .dates import local_today

logger = get_logger(__name__)


class HabitLogWriter(Protocol):
    """The part of the habit repository needed to record completions."""

    def get_log(self, habit_id: int, occurred_on: date) -> Optional[HabitLog]:  # pragma: no cover - interface
        ...

    def upsert_log(self, habit_id: int, occurred_on: date, count: int) -> HabitLog:  # pragma: no cover - interface
        ...

    def delete_log(self, habit_id: int, occurred_on: date) -> None:  # pragma: no cover - interface
        ...


def mark_complete(
    habit: Habit,
    *,
    repository: HabitLogWriter,
    day: date | datetime | None = None,
    count: int | None = None,
) -> HabitLog:
    """Record ``count`` completions (default: the habit's target) for ``day``."""

    if count is None:
        count = habit.target_count
    if count < 0:
        raise ValueError(f"Completion count must be non-negative, got {count}")
    return repository.upsert_log(habit.id, local_today(day), count)


def unmark(
    habit: Habit,
    *,
    repository: HabitLogWriter,
    day: date | datetime | None = None,
) -> None:
    """Remove the completion log for ``day``."""

    repository.delete_log(habit.id, local_today(day))


def toggle_completion(
    habit: Habit,
    *,
    repository: HabitLogWriter,
    day: date | datetime | None = None,
) -> bool:
    """Flip the completed state of ``habit`` on ``day`` and return the new state."""

    occurred_on = local_today(day)
    existing = repository.get_log(habit.id, occurred_on)
    if existing is not None and existing.meets(habit.target_count):
        unmark(habit, repository=repository, day=occurred_on)
        logger.info(f"Habit {habit.id} unmarked for {occurred_on.isoformat()}")
        return False

    mark_complete(habit, repository=repository, day=occurred_on)
    logger.info(f"Habit {habit.id} completed for {occurred_on.isoformat()}")
    return True


__all__ = ["HabitLogWriter", "mark_complete", "toggle_completion", "unmark"]
