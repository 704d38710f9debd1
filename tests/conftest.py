"""Pytest configuration and shared fixtures for habitflow tests.

Provides an isolated SQLite database per test, habit/log factories that persist
through it, and an in-memory data source for exercising the analytics services
without a database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Optional

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from habitflow.models import Habit, HabitFrequency, HabitLog

TEST_USER_ID = 1


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session for arranging test data directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(db_session):
    """Factory for persisted habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        frequency: str = HabitFrequency.DAILY.value,
        custom_days: Optional[list[int]] = None,
        target_count: int = 1,
        is_archived: bool = False,
        user_id: int = TEST_USER_ID,
    ) -> Habit:
        habit = Habit(
            user_id=user_id,
            name=name,
            frequency=frequency,
            custom_days=list(custom_days or []),
            target_count=target_count,
            is_archived=is_archived,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def log_factory(db_session):
    """Factory for persisted habit logs."""

    def _create_log(habit: Habit, occurred_on: date, count: int = 1) -> HabitLog:
        log = HabitLog(
            habit_id=habit.id,
            occurred_on=occurred_on,
            user_id=habit.user_id,
            count=count,
        )
        db_session.add(log)
        db_session.commit()
        return log

    return _create_log


# =============================================================================
# In-memory data source
# =============================================================================


class InMemoryHabitSource:
    """Dict-backed stand-in for the habit repository.

    Records every point lookup in ``lookups`` so tests can assert on access
    patterns.
    """

    def __init__(self, habits: Optional[list[Habit]] = None):
        self.habits: list[Habit] = list(habits or [])
        self.logs: dict[tuple[int, date], HabitLog] = {}
        self.lookups: list[tuple[int, date]] = []

    def add_habit(
        self,
        habit_id: int,
        frequency: str = HabitFrequency.DAILY.value,
        custom_days: Optional[list[int]] = None,
        target_count: int = 1,
        is_archived: bool = False,
        name: str = "",
    ) -> Habit:
        habit = Habit(
            id=habit_id,
            user_id=TEST_USER_ID,
            name=name or f"habit-{habit_id}",
            frequency=frequency,
            custom_days=list(custom_days or []),
            target_count=target_count,
            is_archived=is_archived,
        )
        self.habits.append(habit)
        return habit

    def log(self, habit: Habit, occurred_on: date, count: int = 1) -> HabitLog:
        entry = HabitLog(
            habit_id=habit.id, occurred_on=occurred_on, user_id=TEST_USER_ID, count=count
        )
        self.logs[(habit.id, occurred_on)] = entry
        return entry

    # HabitDataSource
    def list_habits(self, include_archived: bool = False) -> list[Habit]:
        if include_archived:
            return list(self.habits)
        return [h for h in self.habits if not h.is_archived]

    def get_log(self, habit_id: int, occurred_on: date) -> Optional[HabitLog]:
        self.lookups.append((habit_id, occurred_on))
        return self.logs.get((habit_id, occurred_on))

    def list_logs(
        self,
        habit_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[HabitLog]:
        rows = [
            entry
            for (hid, day), entry in self.logs.items()
            if hid == habit_id
            and (start_date is None or day >= start_date)
            and (end_date is None or day <= end_date)
        ]
        return sorted(rows, key=lambda entry: entry.occurred_on)

    # HabitLogWriter
    def upsert_log(self, habit_id: int, occurred_on: date, count: int) -> HabitLog:
        entry = HabitLog(
            habit_id=habit_id, occurred_on=occurred_on, user_id=TEST_USER_ID, count=count
        )
        self.logs[(habit_id, occurred_on)] = entry
        return entry

    def delete_log(self, habit_id: int, occurred_on: date) -> None:
        self.logs.pop((habit_id, occurred_on), None)


@pytest.fixture
def source():
    """Empty in-memory habit data source."""
    return InMemoryHabitSource()
