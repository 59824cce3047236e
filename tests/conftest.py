"""Pytest configuration and shared fixtures for HabitMaster tests.

Domain habits are built in memory; repository and route tests get an isolated
SQLite file per test so nothing touches the real data directory.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable

import pytest
from sqlmodel import SQLModel, create_engine

from habitmaster import models  # noqa: F401  # register tables with SQLModel metadata
from habitmaster.domain.habit import Completion, DailyRule, Habit, RecurrenceRule
from habitmaster.infra.database import create_session_factory
from habitmaster.infra.repositories import SQLModelHabitRepository

# =============================================================================
# Time Fixtures
# =============================================================================

FIXED_NOW = datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """A fixed "now" (Friday 2024-01-05, noon UTC)."""
    return FIXED_NOW


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory():
    """Factory for in-memory domain habits.

    Returns:
        Callable: Function building ``Habit`` snapshots with sensible defaults
    """

    counter = {"n": 0}

    def _create_habit(
        name: str = "Test Habit",
        rule: RecurrenceRule | None = None,
        completed_on: Iterable[date] = (),
        created_at: datetime | None = None,
        habit_id: str | None = None,
        **kwargs,
    ) -> Habit:
        counter["n"] += 1
        return Habit(
            id=habit_id or f"habit-{counter['n']}",
            name=name,
            rule=rule or DailyRule(),
            created_at=created_at or datetime(2023, 12, 1, tzinfo=timezone.utc),
            completions=tuple(Completion(date=d) for d in completed_on),
            **kwargs,
        )

    return _create_habit


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
def session_factory(db_engine):
    """Transactional session factory matching the one the app uses."""
    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app_env(monkeypatch, tmp_path):
    """Point configuration at a temp data dir and database."""

    monkeypatch.setenv("HABITMASTER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("HABITMASTER_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("HABITMASTER_TIMEZONE", "UTC")
    monkeypatch.delenv("HABITMASTER_RATE_WINDOW_DAYS", raising=False)
    monkeypatch.delenv("HABITMASTER_EMAIL_REMINDERS", raising=False)
    monkeypatch.delenv("HABITMASTER_EMAIL_TIME", raising=False)
    return tmp_path


@pytest.fixture
def app(app_env, monkeypatch):
    """Flask app with the wall clock pinned to ``FIXED_NOW``."""

    from habitmaster import create_app
    from habitmaster.blueprints.habits import routes

    monkeypatch.setattr(routes, "_now", lambda: FIXED_NOW)
    return create_app("testing")


@pytest.fixture
def client(app):
    return app.test_client()
