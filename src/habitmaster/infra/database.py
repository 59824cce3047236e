"""Database engine and session helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig

SessionFactory = Callable[[], ContextManager[Session]]


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        _apply_sqlite_pragmas(engine, config.SQLITE_PRAGMAS)
    return engine


def _apply_sqlite_pragmas(engine: Engine, pragmas: dict[str, str]) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragmas(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        for name, value in pragmas.items():
            cursor.execute(f"PRAGMA {name}={value}")
        cursor.close()


def init_database(engine: Engine) -> None:
    """Create any missing tables."""
    from .. import models  # noqa: F401  # registers tables on SQLModel.metadata

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Return a callable producing transactional session scopes."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, SessionFactory]:
    """Engine plus session factory with the schema in place."""

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, create_session_factory(engine)


__all__ = [
    "SessionFactory",
    "bootstrap_database",
    "create_db_engine",
    "create_session_factory",
    "init_database",
]
