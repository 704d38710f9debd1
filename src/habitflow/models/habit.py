"""Habits tracking data structures."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class HabitFrequency(str, Enum):
    """Recurrence rule of a habit."""

    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Habit(SQLModel, table=True):
    """A recurring activity the user tracks.

    ``custom_days`` holds weekday indices with 0=Sunday .. 6=Saturday and is only
    consulted when ``frequency`` is ``custom``.
    """

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    icon: str = Field(default="", max_length=16)
    color: str = Field(default="#6366F1", max_length=16)
    category: str = Field(default="other", max_length=32)
    frequency: str = Field(default=HabitFrequency.DAILY.value, max_length=16)
    custom_days: list[int] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    target_count: int = Field(default=1, nullable=False)
    is_archived: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)


class HabitLog(SQLModel, table=True):
    """How many completions were logged for a habit on one calendar day."""

    __tablename__: ClassVar[str] = "habit_log"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    occurred_on: date = Field(primary_key=True, index=True)
    user_id: int = Field(nullable=False, index=True)
    count: int = Field(default=1, nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)

    def meets(self, target_count: int) -> bool:
        """Return True when this log satisfies ``target_count`` completions."""
        return self.count >= target_count
