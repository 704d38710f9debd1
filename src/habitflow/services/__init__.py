"""Domain services for habit scheduling and analytics."""

from . import dates, habit_logs, habits, schedule

__all__ = ["dates", "habit_logs", "habits", "schedule"]
