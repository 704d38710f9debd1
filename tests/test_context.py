"""Smoke test for the wired application context."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from habitflow import create_app_context
from habitflow.config import TestConfig
from habitflow.models import Habit, HabitFrequency
from habitflow.services import habit_logs

TODAY = date(2025, 1, 15)


@pytest.fixture
def ctx(tmp_path, monkeypatch):
    monkeypatch.setenv("HABITFLOW_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITFLOW_STREAK_WALK_LIMIT", "30")
    context = create_app_context(TestConfig(), user_id=42, configure_logging=False)
    yield context
    context.engine.dispose()


def test_context_end_to_end(ctx):
    repo = ctx.habit_repo
    run = repo.create(Habit(user_id=0, name="Run", frequency=HabitFrequency.DAILY.value))
    stretch = repo.create(
        Habit(user_id=0, name="Stretch", frequency=HabitFrequency.CUSTOM.value, custom_days=[3])
    )
    for n in range(3):
        habit_logs.mark_complete(run, repository=repo, day=TODAY - timedelta(days=n))
    habit_logs.mark_complete(stretch, repository=repo, day=TODAY)

    progress, streak = ctx.dashboard(today=TODAY)
    stats = ctx.habit_stats(run.id, today=TODAY)
    review = ctx.weekly_review(today=TODAY)

    assert (progress.completed, progress.total) == (2, 2)
    assert streak == 3
    assert stats.current_streak == 3
    assert stats.total_completions == 3
    assert review.total_habits == 2
    assert review.completed_habits == 4
    assert review.most_consistent.habit.id == stretch.id


def test_habit_stats_unknown_habit(ctx):
    assert ctx.habit_stats(12345) is None


def test_streak_limit_comes_from_config(ctx):
    run = ctx.habit_repo.create(Habit(user_id=0, name="Run"))
    for n in range(60):
        ctx.habit_repo.upsert_log(run.id, TODAY - timedelta(days=n), 1)

    assert ctx.streak_limit == 30
    assert ctx.habit_stats(run.id, today=TODAY).current_streak == 30


def test_sqlite_foreign_keys_are_enforced(ctx):
    with ctx.engine.connect() as connection:
        assert connection.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1


def test_delete_habit_with_logs_under_foreign_keys(ctx):
    run = ctx.habit_repo.create(Habit(user_id=0, name="Run"))
    ctx.habit_repo.upsert_log(run.id, TODAY, 1)

    ctx.habit_repo.delete(run.id)

    assert ctx.habit_repo.get_by_id(run.id) is None
    assert ctx.habit_repo.list_logs(run.id) == []
