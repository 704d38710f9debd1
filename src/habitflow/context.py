"""Application context for dependency injection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from .config import BaseConfig
from .domain.repositories import HabitRepository
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.repositories import SQLModelHabitRepository
from .logging_config import get_logger, setup_logging
from .services import habits


@dataclass
class AppContext:
    """Configuration, storage and the habit repository for one user."""

    config: BaseConfig
    engine: Engine
    session_factory: Callable[[], Session]
    habit_repo: HabitRepository
    logger: logging.Logger

    @property
    def streak_limit(self) -> int:
        return self.config.STREAK_WALK_LIMIT

    def habit_stats(
        self, habit_id: int, *, today: date | datetime | None = None
    ) -> Optional[habits.HabitStats]:
        """Detail figures for one habit, or None if it does not exist."""

        habit = self.habit_repo.get_by_id(habit_id)
        if habit is None:
            return None
        return habits.habit_stats(
            habit, repository=self.habit_repo, today=today, limit=self.streak_limit
        )

    def dashboard(
        self, *, today: date | datetime | None = None
    ) -> tuple[habits.DailyProgress, int]:
        return habits.dashboard(repository=self.habit_repo, today=today, limit=self.streak_limit)

    def weekly_review(self, *, today: date | datetime | None = None) -> habits.WeeklyStats:
        return habits.weekly_review(
            repository=self.habit_repo, today=today, limit=self.streak_limit
        )


def create_app_context(
    config: Optional[BaseConfig] = None, *, user_id: int, configure_logging: bool = True
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    logger = setup_logging(config) if configure_logging else get_logger("habitflow")

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    logger.info(f"Application context ready for user {user_id}")
    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        habit_repo=SQLModelHabitRepository(session_factory, user_id=user_id),
        logger=logger,
    )
