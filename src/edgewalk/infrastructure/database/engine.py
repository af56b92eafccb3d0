"""Database engine setup for SQLite with WAL mode.

SQLite backs the document store: WAL mode so concurrent traversals can
read while a writer seeds, foreign keys so index entries never outlive
their documents, and a busy timeout that bounds how long a single store
call may wait for a lock before it is reported as unavailable.

SQLAlchemy Core (not ORM) is used because documents are schemaless JSON
rows; there is nothing for an identity map to track.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from edgewalk.infrastructure.database.schema import metadata

DEFAULT_BUSY_TIMEOUT = 5.0


def create_db_engine(db_path: Path, *, busy_timeout: float = DEFAULT_BUSY_TIMEOUT) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": busy_timeout, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(db_path: Path, *, busy_timeout: float = DEFAULT_BUSY_TIMEOUT) -> Engine:
    """Initialize the store database at *db_path*.

    Creates the parent directory and all tables from
    :data:`schema.metadata`.  Idempotent — safe to call on an existing
    database.

    Returns the engine ready for use.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path, busy_timeout=busy_timeout)
    metadata.create_all(engine)
    return engine


def reset_database(engine: Engine) -> None:
    """Drop and recreate every table, discarding all stored state."""
    metadata.drop_all(engine)
    metadata.create_all(engine)
