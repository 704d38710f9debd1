"""Habit streak and progress analytics.

Every function here is a pure reader: it asks the data source for habits and logs
and folds the answers into a number or a small DTO. Repository errors propagate
unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..config import DEFAULT_STREAK_WALK_LIMIT
from ..domain.repositories.habit import HabitDataSource
from ..logging_config import get_logger
from ..models.habit import Habit, HabitLog
from .dates import days_between, local_today, walk_back, week_window
from .schedule import is_due_on, todays_habits

logger = get_logger(__name__)


@dataclass(slots=True)
class DailyProgress:
    """Completed vs. total habits due today."""

    completed: int
    total: int


@dataclass(slots=True)
class HabitRate:
    """A habit paired with its weekly completion rate."""

    habit: Habit
    rate: float


@dataclass(slots=True)
class WeeklyStats:
    """Cross-habit summary for the current week window."""

    total_habits: int
    completed_habits: int
    best_streak: int
    most_consistent: Optional[HabitRate]
    least_consistent: Optional[HabitRate]


@dataclass(slots=True)
class HabitStats:
    """Per-habit figures shown on the habit detail screen."""

    current_streak: int
    longest_streak: int
    weekly_completion_rate: float
    total_completions: int


def _qualifies(log: Optional[HabitLog], habit: Habit) -> bool:
    return log is not None and log.meets(habit.target_count)


def _completed_on(habit: Habit, day: date, repository: HabitDataSource) -> bool:
    return _qualifies(repository.get_log(habit.id, day), habit)


def _active(habits: Iterable[Habit]) -> list[Habit]:
    return [habit for habit in habits if not habit.is_archived]


def current_streak(
    habit: Habit,
    *,
    repository: HabitDataSource,
    today: date | datetime | None = None,
    limit: int = DEFAULT_STREAK_WALK_LIMIT,
) -> int:
    """Consecutive completed due days ending today.

    Days the habit is not due on are skipped without breaking the streak. The
    walk visits at most ``limit`` days and returns what it counted so far.
    """

    streak = 0
    for day in walk_back(local_today(today), limit):
        if not is_due_on(habit, day):
            continue
        if not _completed_on(habit, day, repository):
            return streak
        streak += 1

    logger.debug(f"Streak walk for habit {habit.id} stopped after {limit} days")
    return streak


def longest_streak(habit: Habit, *, repository: HabitDataSource) -> int:
    """Longest run of qualifying logs on consecutive calendar days.

    Only logged dates are scanned, so any missing day breaks a run regardless of
    whether the habit was due that day.
    """

    logs = sorted(repository.list_logs(habit.id), key=lambda log: log.occurred_on)

    longest = 0
    run = 0
    last_day: date | None = None
    for log in logs:
        if not _qualifies(log, habit):
            longest = max(longest, run)
            run = 0
            last_day = None
            continue
        if last_day is not None and days_between(last_day, log.occurred_on) == 1:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
        last_day = log.occurred_on

    return max(longest, run)


def _week_counts(
    habit: Habit, *, repository: HabitDataSource, today: date
) -> tuple[int, int]:
    """Return (expected, completed) due days for the week window around ``today``."""

    expected = 0
    completed = 0
    for day in week_window(today):
        if not is_due_on(habit, day):
            continue
        expected += 1
        if _completed_on(habit, day, repository):
            completed += 1
    return expected, completed


def weekly_completion_rate(
    habit: Habit,
    *,
    repository: HabitDataSource,
    today: date | datetime | None = None,
) -> float:
    """Percentage (0-100) of this week's due days that were completed.

    A habit that is never due this week has a rate of 0.
    """

    expected, completed = _week_counts(habit, repository=repository, today=local_today(today))
    if expected == 0:
        return 0.0
    return completed / expected * 100


def daily_progress(
    habits: Iterable[Habit],
    *,
    repository: HabitDataSource,
    today: date | datetime | None = None,
) -> DailyProgress:
    """How many of today's habits have been completed."""

    day = local_today(today)
    due = todays_habits(habits, today=day)
    completed = sum(1 for habit in due if _completed_on(habit, day, repository))
    return DailyProgress(completed=completed, total=len(due))


def overall_streak(
    habits: Iterable[Habit],
    *,
    repository: HabitDataSource,
    today: date | datetime | None = None,
    limit: int = DEFAULT_STREAK_WALK_LIMIT,
) -> int:
    """Consecutive days on which every due, non-archived habit was completed.

    Days with nothing due are skipped. Uses the same visit limit as
    :func:`current_streak`.
    """

    active = _active(habits)
    streak = 0
    for day in walk_back(local_today(today), limit):
        due = [habit for habit in active if is_due_on(habit, day)]
        if not due:
            continue
        if not all(_completed_on(habit, day, repository) for habit in due):
            return streak
        streak += 1

    logger.debug(f"Overall streak walk stopped after {limit} days")
    return streak


def weekly_stats(
    habits: Iterable[Habit],
    *,
    repository: HabitDataSource,
    today: date | datetime | None = None,
    limit: int = DEFAULT_STREAK_WALK_LIMIT,
) -> WeeklyStats:
    """Summarise the current week across all non-archived habits."""

    day = local_today(today)
    active = _active(habits)

    completed_total = 0
    rates: list[HabitRate] = []
    for habit in active:
        expected, completed = _week_counts(habit, repository=repository, today=day)
        completed_total += completed
        rates.append(HabitRate(habit=habit, rate=completed / expected * 100 if expected else 0.0))

    most: Optional[HabitRate] = None
    least: Optional[HabitRate] = None
    for entry in rates:
        # Strict comparisons keep the first habit on ties
        if most is None or entry.rate > most.rate:
            most = entry
        if least is None or entry.rate < least.rate:
            least = entry

    return WeeklyStats(
        total_habits=len(active),
        completed_habits=completed_total,
        best_streak=overall_streak(active, repository=repository, today=day, limit=limit),
        most_consistent=most,
        least_consistent=least,
    )


def habit_stats(
    habit: Habit,
    *,
    repository: HabitDataSource,
    today: date | datetime | None = None,
    limit: int = DEFAULT_STREAK_WALK_LIMIT,
) -> HabitStats:
    """Collect the detail-screen figures for one habit (archived or not)."""

    day = local_today(today)
    return HabitStats(
        current_streak=current_streak(habit, repository=repository, today=day, limit=limit),
        longest_streak=longest_streak(habit, repository=repository),
        weekly_completion_rate=weekly_completion_rate(habit, repository=repository, today=day),
        total_completions=sum(log.count for log in repository.list_logs(habit.id)),
    )


def dashboard(
    *,
    repository: HabitDataSource,
    today: date | datetime | None = None,
    limit: int = DEFAULT_STREAK_WALK_LIMIT,
) -> tuple[DailyProgress, int]:
    """Daily progress and overall streak for the user's current habits."""

    day = local_today(today)
    habits = repository.list_habits(include_archived=False)
    return (
        daily_progress(habits, repository=repository, today=day),
        overall_streak(habits, repository=repository, today=day, limit=limit),
    )


def weekly_review(
    *,
    repository: HabitDataSource,
    today: date | datetime | None = None,
    limit: int = DEFAULT_STREAK_WALK_LIMIT,
) -> WeeklyStats:
    """Weekly stats over the user's non-archived habits."""

    habits = repository.list_habits(include_archived=False)
    return weekly_stats(habits, repository=repository, today=today, limit=limit)


__all__ = [
    "DailyProgress",
    "HabitRate",
    "HabitStats",
    "WeeklyStats",
    "current_streak",
    "daily_progress",
    "dashboard",
    "habit_stats",
    "longest_streak",
    "overall_streak",
    "weekly_completion_rate",
    "weekly_review",
    "weekly_stats",
]
