"""Repository protocol definitions for domain layer."""

from .habit import HabitDataSource, HabitRepository

__all__ = [
    "HabitDataSource",
    "HabitRepository",
]
