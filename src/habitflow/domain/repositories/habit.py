"""Habit repository protocols."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitLog


class HabitDataSource(Protocol):
    """Read-only view of habits and their logs used by the analytics services."""

    def list_habits(self, include_archived: bool = False) -> list[Habit]:
        """List habits, optionally including archived ones."""
        ...

    def get_log(self, habit_id: int, occurred_on: date) -> Optional[HabitLog]:
        """Return the log for one habit and day, or None when nothing was logged."""
        ...

    def list_logs(
        self,
        habit_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[HabitLog]:
        """Return logs for a habit in ascending date order, optionally bounded."""
        ...


class HabitRepository(HabitDataSource, Protocol):
    """Repository for managing habit entities and their logs."""

    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        ...

    def delete(self, habit_id: int) -> None:
        """Delete a habit and all of its logs."""
        ...

    def toggle_archive(self, habit_id: int) -> Habit:
        """Flip the archived flag of a habit."""
        ...

    def upsert_log(self, habit_id: int, occurred_on: date, count: int) -> HabitLog:
        """Create or overwrite the log for a habit and day."""
        ...

    def delete_log(self, habit_id: int, occurred_on: date) -> None:
        """Remove the log for a habit and day."""
        ...
