"""SQLite database engine and schema via SQLAlchemy Core."""

from edgewalk.infrastructure.database.engine import create_db_engine, init_database, reset_database
from edgewalk.infrastructure.database.schema import (
    collections,
    documents,
    index_entries,
    indexes,
    metadata,
)

__all__ = [
    "collections",
    "create_db_engine",
    "documents",
    "index_entries",
    "indexes",
    "init_database",
    "metadata",
    "reset_database",
]
