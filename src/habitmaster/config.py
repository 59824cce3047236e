"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import time
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

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


def _parse_hhmm(value: str) -> time:
    try:
        hh, mm = value.strip().split(":")
        return time(int(hh), int(mm))
    except ValueError as exc:
        raise ValueError(f"Expected HH:MM time, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitMaster"
    DB_FILENAME = "habitmaster.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("HABITMASTER_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HABITMASTER_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HABITMASTER_DATABASE_URL", self._build_sqlite_url())
        self.TIMEZONE_NAME = os.getenv("HABITMASTER_TIMEZONE", "UTC")
        self.REFERENCE_TZ = self._resolve_timezone(self.TIMEZONE_NAME)
        self.RATE_WINDOW_DAYS = _env_int("HABITMASTER_RATE_WINDOW_DAYS", 30)
        self.EMAIL_REMINDERS_ENABLED = _env_bool("HABITMASTER_EMAIL_REMINDERS", default=True)
        self.EMAIL_REMINDER_TIME = _parse_hhmm(os.getenv("HABITMASTER_EMAIL_TIME", "15:00"))
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("HABITMASTER_SECRET_KEY must be set in non-dev mode.")
        if self.RATE_WINDOW_DAYS < 1:
            raise ValueError("HABITMASTER_RATE_WINDOW_DAYS must be at least 1.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HABITMASTER_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected install locations fall back to user-local storage.
            local_app_data = os.getenv("LOCALAPPDATA") or (Path.home() / ".local" / "share")
            fallback_path = Path(local_app_data).expanduser() / self.APP_NAME
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    @staticmethod
    def _resolve_timezone(name: str) -> ZoneInfo:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"HABITMASTER_TIMEZONE is not a known timezone: {name!r}") from exc

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        return {"connect_args": {"check_same_thread": False}}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Isolated configuration backed by an in-memory database."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = os.getenv("HABITMASTER_DATABASE_URL", "sqlite://")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        options = super().sqlalchemy_engine_options()
        if self.DATABASE_URL == "sqlite://":
            from sqlalchemy.pool import StaticPool

            options["poolclass"] = StaticPool
        return options


__all__ = ["BaseConfig", "DevConfig", "TestConfig"]
