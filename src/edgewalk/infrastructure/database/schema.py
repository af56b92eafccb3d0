"""SQLAlchemy Core table definitions for the edgewalk document store.

Documents are schemaless: each row carries its collection name and a JSON
``data`` object.  Secondary indexes are materialized into
``index_entries``, one row per (index, document), keyed by the
JSON-encoded term tuple.  Uniqueness for unique indexes is enforced by a
partial unique index on ``(index_name, term)``, so a duplicate key fails
inside the database, not in application code.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

collections = Table(
    "collections",
    metadata,
    Column("name", Text, primary_key=True),
    Column("created", Text, nullable=False),
)

documents = Table(
    "documents",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("collection", Text, ForeignKey("collections.name"), nullable=False),
    Column("data", JSON, nullable=False),
    Column("created", Text, nullable=False),
)

indexes = Table(
    "indexes",
    metadata,
    Column("name", Text, primary_key=True),
    Column("source", Text, ForeignKey("collections.name"), nullable=False),
    Column("terms", JSON, nullable=False),  # list of field paths
    Column("is_unique", Integer, default=0, server_default="0"),
    Column("created", Text, nullable=False),
)

index_entries = Table(
    "index_entries",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("index_name", Text, ForeignKey("indexes.name"), nullable=False),
    Column("term", Text, nullable=False),  # canonical JSON array of term values
    Column("ref", Integer, ForeignKey("documents.id"), nullable=False),
    Column("is_unique", Integer, default=0, server_default="0"),
    UniqueConstraint("index_name", "ref"),
)

# ---------------------------------------------------------------------------
# Indexes on the store's own tables
# ---------------------------------------------------------------------------

Index("ix_documents_collection", documents.c.collection, documents.c.id)
Index("ix_index_entries_lookup", index_entries.c.index_name, index_entries.c.term, index_entries.c.ref)
Index(
    "ux_index_entries_unique_term",
    index_entries.c.index_name,
    index_entries.c.term,
    unique=True,
    sqlite_where=index_entries.c.is_unique == 1,
)
