"""Engine and session factory construction."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from fulfillment.infrastructure.config import Settings
from fulfillment.infrastructure.persistence.models import Base


def create_db_engine(settings: Settings) -> Engine:
    """Build an engine whose transactions serialize writers correctly.

    PostgreSQL runs READ COMMITTED and relies on ``SELECT ... FOR UPDATE``
    row locks; ``lock_timeout`` bounds how long a writer waits for one.
    SQLite has no row locks, so every transaction is opened with
    ``BEGIN IMMEDIATE``: the write lock is taken before the first read,
    and a second writer waits (up to ``db_timeout``) instead of reading a
    stale remaining quantity.
    """
    engine = create_engine(settings.database_url, **engine_options(settings))
    if settings.is_sqlite:
        _install_sqlite_hooks(engine)
    return engine


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for ``create_engine``; both branches honor ``db_timeout``."""
    if settings.is_sqlite:
        return {
            "connect_args": {"timeout": settings.db_timeout, "check_same_thread": False},
        }
    lock_timeout_ms = int(settings.db_timeout * 1000)
    return {
        "isolation_level": "READ COMMITTED",
        "pool_pre_ping": True,
        "connect_args": {"options": f"-c lock_timeout={lock_timeout_ms}"},
    }


def _install_sqlite_hooks(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:
        # Take transaction control away from pysqlite so "begin" below is
        # the only BEGIN that is ever emitted.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    Base.metadata.create_all(engine)
