"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

load_dotenv()

DEFAULT_STREAK_WALK_LIMIT = 1000


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_positive_int(name: str, default: int) -> int:
    """Read a positive integer from the environment."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "habitflow"
    DB_FILENAME = "habitflow.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITFLOW_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITFLOW_DATABASE_URL", self._build_sqlite_url())
        self.STREAK_WALK_LIMIT = _env_positive_int(
            "HABITFLOW_STREAK_WALK_LIMIT", DEFAULT_STREAK_WALK_LIMIT
        )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITFLOW_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlite_pragmas(self) -> dict[str, str]:
        """PRAGMAs applied to every new SQLite connection; empty for other backends."""

        if not self.DATABASE_URL.startswith("sqlite"):
            return {}
        if self.DATABASE_URL in {"sqlite://", "sqlite:///:memory:"}:
            return {"foreign_keys": "on"}
        return dict(self.SQLITE_PRAGMAS)

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL in {"sqlite://", "sqlite:///:memory:"}:
            # One shared connection, otherwise each session sees an empty database
            return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration: local SQLite with verbose console logging."""

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True


class TestConfig(BaseConfig):
    """Configuration for the test suite, backed by an in-memory database."""

    __test__ = False  # not a pytest test class

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"
