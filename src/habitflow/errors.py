"""Exception types raised by the persistence layer."""

from __future__ import annotations


class DataAccessError(RuntimeError):
    """A habit or log lookup failed in the underlying store."""


class HabitNotFoundError(LookupError):
    """The requested habit does not exist for the current user."""

    def __init__(self, habit_id: int):
        super().__init__(f"Habit {habit_id} not found")
        self.habit_id = habit_id
