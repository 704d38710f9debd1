"""SQLModel table exports."""

from .habit import Habit, HabitFrequency, HabitLog

__all__ = [
    "Habit",
    "HabitFrequency",
    "HabitLog",
]
