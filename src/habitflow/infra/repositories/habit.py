"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Callable, Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ...errors import DataAccessError, HabitNotFoundError
from ...logging_config import get_logger
from ...models.habit import Habit, HabitLog

logger = get_logger(__name__)


class SQLModelHabitRepository:
    """SQLModel-based habit repository scoped to a single user."""

    def __init__(self, session_factory: Callable[[], Session], *, user_id: int):
        """Initialize with a session factory and the owning user's id."""
        self.session_factory = session_factory
        self.user_id = user_id

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with self.session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error(f"Failed to {action} for user {self.user_id}: {exc}")
            raise DataAccessError(f"Could not {action}") from exc

    def _require_habit(self, session: Session, habit_id: int) -> Habit:
        habit = session.exec(
            select(Habit).where(Habit.id == habit_id, Habit.user_id == self.user_id)
        ).first()
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    def _find_log(self, session: Session, habit_id: int, occurred_on: date) -> Optional[HabitLog]:
        return session.exec(
            select(HabitLog)
            .where(HabitLog.user_id == self.user_id)
            .where(HabitLog.habit_id == habit_id)
            .where(HabitLog.occurred_on == occurred_on)
        ).first()

    # Habit operations
    def get_by_id(self, habit_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self._session("load habit") as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == self.user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_habits(self, include_archived: bool = False) -> list[Habit]:
        """List habits, newest first, optionally including archived ones."""
        with self._session("list habits") as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == self.user_id)
                .order_by(Habit.created_at.desc(), Habit.id.desc())  # type: ignore[union-attr]
            )
            if not include_archived:
                statement = statement.where(Habit.is_archived == False)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        if habit.target_count < 1:
            raise ValueError("target_count must be a positive integer")
        with self._session("create habit") as session:
            habit.user_id = self.user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            logger.info(f"Created habit {habit.id} ({habit.name!r})")
            return habit

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        if habit.target_count < 1:
            raise ValueError("target_count must be a positive integer")
        with self._session("update habit") as session:
            habit.user_id = self.user_id
            habit.updated_at = datetime.now(timezone.utc)
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def delete(self, habit_id: int) -> None:
        """Delete a habit and every log recorded against it."""
        with self._session("delete habit") as session:
            logs = session.exec(
                select(HabitLog)
                .where(HabitLog.user_id == self.user_id)
                .where(HabitLog.habit_id == habit_id)
            ).all()
            for log in logs:
                session.delete(log)
            session.flush()

            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == self.user_id)
            ).first()
            if habit:
                session.delete(habit)
            session.commit()
            logger.info(f"Deleted habit {habit_id} and {len(logs)} logs")

    def toggle_archive(self, habit_id: int) -> Habit:
        """Flip the archived flag of a habit."""
        habit = self.get_by_id(habit_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        habit.is_archived = not habit.is_archived
        return self.update(habit)

    # Habit log operations
    def get_log(self, habit_id: int, occurred_on: date) -> Optional[HabitLog]:
        """Get the log for one habit and day, or None."""
        with self._session("load habit log") as session:
            obj = self._find_log(session, habit_id, occurred_on)
            if obj:
                session.expunge(obj)
            return obj

    def list_logs(
        self,
        habit_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[HabitLog]:
        """Get logs for a habit in ascending date order, optionally bounded."""
        with self._session("list habit logs") as session:
            statement = (
                select(HabitLog)
                .where(HabitLog.user_id == self.user_id)
                .where(HabitLog.habit_id == habit_id)
            )
            if start_date is not None:
                statement = statement.where(HabitLog.occurred_on >= start_date)
            if end_date is not None:
                statement = statement.where(HabitLog.occurred_on <= end_date)

            rows = list(session.exec(statement.order_by(HabitLog.occurred_on)).all())  # type: ignore[arg-type]
            session.expunge_all()
            return rows

    def upsert_log(self, habit_id: int, occurred_on: date, count: int) -> HabitLog:
        """Insert or overwrite the log for a habit and day.

        Raises HabitNotFoundError when the habit belongs to another user.
        """
        if count < 0:
            raise ValueError("count must be non-negative")
        with self._session("save habit log") as session:
            self._require_habit(session, habit_id)
            existing = self._find_log(session, habit_id, occurred_on)
            if existing:
                existing.count = count
                entry = existing
            else:
                entry = HabitLog(
                    habit_id=habit_id,
                    occurred_on=occurred_on,
                    user_id=self.user_id,
                    count=count,
                )
            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
            return entry

    def delete_log(self, habit_id: int, occurred_on: date) -> None:
        """Delete the log for a habit and day if one exists.

        Raises HabitNotFoundError when the habit belongs to another user.
        """
        with self._session("delete habit log") as session:
            self._require_habit(session, habit_id)
            entry = self._find_log(session, habit_id, occurred_on)
            if entry:
                session.delete(entry)
                session.commit()
