"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Poupeja"
    DB_FILENAME = "poupeja.db"
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("POUPEJA_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("POUPEJA_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("POUPEJA_DATABASE_URL", self._build_sqlite_url())
        self.REQUIRE_SUBSCRIPTION = _env_bool("POUPEJA_REQUIRE_SUBSCRIPTION", default=False)
        self.SCHEDULER_ENABLED = _env_bool("POUPEJA_SCHEDULER_ENABLED", default=False)
        self.REMINDER_WINDOW_MINUTES = _env_int("POUPEJA_REMINDER_WINDOW_MINUTES", 10)
        self.SWEEP_INTERVAL_MINUTES = _env_int("POUPEJA_SWEEP_INTERVAL_MINUTES", 5)
        self.TIMEZONE = os.getenv("POUPEJA_TIMEZONE", "America/Sao_Paulo")
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("POUPEJA_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("POUPEJA_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; never starts background jobs."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.SCHEDULER_ENABLED = False
