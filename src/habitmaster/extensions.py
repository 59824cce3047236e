"""Database and extension wiring for HabitMaster."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .domain.repositories import HabitRepository
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import SQLModelHabitRepository

_EXTENSION_KEY = "habitmaster"


def init_db(app: Flask) -> None:
    """Create the engine, ensure the schema exists and stash both on the app."""

    config: BaseConfig = app.config["HABITMASTER_CONFIG"]
    engine = create_db_engine(config)
    init_database(engine)
    app.extensions[_EXTENSION_KEY] = {
        "engine": engine,
        "session_factory": create_session_factory(engine),
    }


def _state() -> dict:
    state = current_app.extensions.get(_EXTENSION_KEY)
    if state is None:  # pragma: no cover - init_db always runs in create_app
        raise RuntimeError("Database engine not initialized")
    return state


def get_session_factory() -> SessionFactory:
    return _state()["session_factory"]


def get_repository() -> HabitRepository:
    """Habit repository for the current app."""

    return SQLModelHabitRepository(get_session_factory())


__all__ = ["get_repository", "get_session_factory", "init_db"]
