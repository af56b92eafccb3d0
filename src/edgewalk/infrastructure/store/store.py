"""DocumentStore — schemaless document store with store-maintained indexes.

The store exposes a single primitive, :meth:`DocumentStore.query`, which
evaluates one expression from :mod:`.expressions` inside one database
transaction and returns its result or raises a classified
:class:`~edgewalk.domain.errors.StoreError`.

Index maintenance happens here: inserting a document writes one entry per
index declared on its collection in the same transaction.  A unique index
rejects a duplicate key through the database's partial unique index; the
resulting ``IntegrityError`` aborts the whole transaction (so the document
is not stored either) and surfaces as ``ConstraintViolation``.

Index entries are ordered by document ref.  A page is read with a keyset
seek (``ref >= start``) and one extra row to learn whether another page
exists, so the cursor is only issued when there really is more to read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import exc as sa_exc
from sqlalchemy import func, insert, select

from edgewalk.domain.errors import (
    ConfigurationError,
    ConstraintViolation,
    IndexNotFound,
    NotFound,
    StoreError,
    StoreUnavailable,
)
from edgewalk.domain.indexes import FieldPath, IndexSpec
from edgewalk.domain.paging import Page, Projection, Ref
from edgewalk.infrastructure.database.engine import reset_database
from edgewalk.infrastructure.database.schema import (
    collections,
    documents,
    index_entries,
    indexes,
)
from edgewalk.infrastructure.store.cursors import decode_cursor, encode_cursor, encode_term
from edgewalk.infrastructure.store.expressions import (
    Count,
    Create,
    CreateCollection,
    CreateIndex,
    Expression,
    Get,
    GetIndex,
    Match,
    Paginate,
    ResetDatabase,
)

if TYPE_CHECKING:
    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_MISSING = object()


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def extract_term(spec: IndexSpec, document: dict[str, Any]) -> tuple[Any, ...] | None:
    """Read the term tuple *spec* indexes *document* under.

    *document* is the stored view ``{"data": {...}}``.  Returns ``None``
    when any term field is missing or null — such documents are left out
    of the index.
    """
    values: list[Any] = []
    for path in spec.terms:
        value = _resolve_path(document, path)
        if value is _MISSING or value is None:
            return None
        values.append(value)
    return tuple(values)


def _resolve_path(document: Any, path: FieldPath) -> Any:
    current = document
    for segment in path:
        if not isinstance(current, dict) or segment not in current:
            return _MISSING
        current = current[segment]
    return current


class DocumentStore:
    """Store handle passed explicitly to every component that reads or writes.

    Safe to share between threads: each :meth:`query` call checks out its
    own connection from the engine's pool.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._handlers: dict[type[Expression], Callable[[Connection, Any], Any]] = {
            CreateCollection: self._create_collection,
            CreateIndex: self._create_index,
            GetIndex: self._get_index,
            Create: self._create,
            Get: self._get,
            Paginate: self._paginate,
            Count: self._count,
        }

    @property
    def engine(self) -> Engine:
        return self._engine

    def query(self, expression: Expression) -> Any:
        """Evaluate *expression* in a single transaction.

        Raises:
            StoreUnavailable: The database could not be reached or timed out.
            IndexNotFound: A referenced index does not exist.
            NotFound: A referenced collection or document does not exist.
            ConfigurationError: An index or query shape is incompatible.
            ConstraintViolation: A write duplicated a unique index key.
        """
        if isinstance(expression, ResetDatabase):
            with self._classified():
                reset_database(self._engine)
            logger.info("Store reset")
            return True

        handler = self._handlers.get(type(expression))
        if handler is None:
            msg = f"Unsupported expression: {type(expression).__name__}"
            raise TypeError(msg)

        with self._classified(), self._engine.begin() as conn:
            return handler(conn, expression)

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Error classification
    # ------------------------------------------------------------------

    @contextmanager
    def _classified(self) -> Iterator[None]:
        """Translate driver failures into :class:`StoreError` kinds."""
        try:
            yield
        except StoreError:
            raise
        except sa_exc.TimeoutError as exc:
            raise StoreUnavailable(f"Timed out waiting for a connection: {exc}") from exc
        except sa_exc.OperationalError as exc:
            raise StoreUnavailable(f"Store unavailable: {exc.orig}") from exc
        except sa_exc.DBAPIError as exc:
            if exc.connection_invalidated:
                raise StoreUnavailable(f"Connection lost: {exc.orig}") from exc
            raise StoreError(str(exc.orig)) from exc

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def _create_collection(self, conn: Connection, expr: CreateCollection) -> bool:
        if self._collection_exists(conn, expr.name):
            return False
        conn.execute(insert(collections).values(name=expr.name, created=_now_iso()))
        logger.debug("Created collection %s", expr.name)
        return True

    @staticmethod
    def _collection_exists(conn: Connection, name: str) -> bool:
        row = conn.execute(select(collections.c.name).where(collections.c.name == name)).first()
        return row is not None

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def _create_index(self, conn: Connection, expr: CreateIndex) -> IndexSpec:
        spec = expr.spec
        if self._load_index(conn, spec.name) is not None:
            msg = f"Index '{spec.name}' already exists"
            raise ConfigurationError(msg)
        if not self._collection_exists(conn, spec.source):
            msg = f"Index '{spec.name}' sources missing collection '{spec.source}'"
            raise ConfigurationError(msg)

        conn.execute(
            insert(indexes).values(
                name=spec.name,
                source=spec.source,
                terms=[list(path) for path in spec.terms],
                is_unique=int(spec.unique),
                created=_now_iso(),
            )
        )

        rows = conn.execute(
            select(documents.c.id, documents.c.data)
            .where(documents.c.collection == spec.source)
            .order_by(documents.c.id)
        ).fetchall()
        for row in rows:
            try:
                self._write_entry(conn, spec, row.id, row.data)
            except ConstraintViolation as exc:
                msg = f"Existing documents violate unique index '{spec.name}': key {exc.key!r}"
                raise ConfigurationError(msg) from exc

        logger.debug("Created index %s over %d %s documents", spec.name, len(rows), spec.source)
        return spec

    def _get_index(self, conn: Connection, expr: GetIndex) -> IndexSpec:
        return self._require_index(conn, expr.name)

    def _load_index(self, conn: Connection, name: str) -> IndexSpec | None:
        row = conn.execute(select(indexes).where(indexes.c.name == name)).mappings().first()
        if row is None:
            return None
        return IndexSpec(
            name=row["name"],
            source=row["source"],
            terms=tuple(tuple(path) for path in row["terms"]),
            unique=bool(row["is_unique"]),
        )

    def _require_index(self, conn: Connection, name: str) -> IndexSpec:
        spec = self._load_index(conn, name)
        if spec is None:
            raise IndexNotFound(name)
        return spec

    def _indexes_on(self, conn: Connection, collection: str) -> list[IndexSpec]:
        names = conn.execute(
            select(indexes.c.name).where(indexes.c.source == collection).order_by(indexes.c.name)
        ).scalars()
        return [self._require_index(conn, name) for name in names]

    def _write_entry(
        self, conn: Connection, spec: IndexSpec, ref: int, data: dict[str, Any]
    ) -> None:
        """Insert the index entry for one document, if it has a term."""
        values = extract_term(spec, {"data": data})
        if values is None:
            return
        try:
            conn.execute(
                insert(index_entries).values(
                    index_name=spec.name,
                    term=encode_term(values),
                    ref=ref,
                    is_unique=int(spec.unique),
                )
            )
        except sa_exc.IntegrityError as exc:
            if spec.unique:
                raise ConstraintViolation(spec.name, values) from exc
            raise

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def _create(self, conn: Connection, expr: Create) -> Ref:
        if not self._collection_exists(conn, expr.collection):
            msg = f"Collection '{expr.collection}' does not exist"
            raise NotFound(msg)

        result = conn.execute(
            insert(documents).values(collection=expr.collection, data=expr.data, created=_now_iso())
        )
        ref_id = int(result.inserted_primary_key[0])

        for spec in self._indexes_on(conn, expr.collection):
            self._write_entry(conn, spec, ref_id, expr.data)

        return Ref(collection=expr.collection, id=ref_id)

    def _get(self, conn: Connection, expr: Get) -> dict[str, Any]:
        row = conn.execute(
            select(documents.c.data).where(
                documents.c.id == expr.ref.id,
                documents.c.collection == expr.ref.collection,
            )
        ).first()
        if row is None:
            msg = f"Document {expr.ref} does not exist"
            raise NotFound(msg)
        return {"ref": expr.ref, "data": row.data}

    # ------------------------------------------------------------------
    # Matching and pagination
    # ------------------------------------------------------------------

    def _resolve_match(self, conn: Connection, match: Match) -> tuple[IndexSpec, str]:
        spec = self._require_index(conn, match.index)
        values = match.terms or ()
        if len(values) != spec.arity:
            msg = f"Index '{spec.name}' is keyed on {spec.arity} term(s), match supplied {len(values)}"
            raise ConfigurationError(msg)
        return spec, encode_term(values)

    def _paginate(self, conn: Connection, expr: Paginate) -> Page:
        spec, term = self._resolve_match(conn, expr.match)

        if expr.projection is Projection.DATA:
            stmt = select(index_entries.c.ref, documents.c.data).select_from(
                index_entries.join(documents, documents.c.id == index_entries.c.ref)
            )
        else:
            stmt = select(index_entries.c.ref)

        stmt = stmt.where(
            index_entries.c.index_name == spec.name,
            index_entries.c.term == term,
        )
        if expr.after is not None:
            try:
                start = decode_cursor(expr.after, index=spec.name, term=term)
            except ValueError as exc:
                raise StoreError(str(exc)) from exc
            stmt = stmt.where(index_entries.c.ref >= start)

        rows = conn.execute(stmt.order_by(index_entries.c.ref).limit(expr.size + 1)).fetchall()

        after = None
        if len(rows) > expr.size:
            after = encode_cursor(spec.name, term, rows[expr.size].ref)
            rows = rows[: expr.size]

        if expr.projection is Projection.DATA:
            data: list[Any] = [row.data for row in rows]
        else:
            data = [Ref(collection=spec.source, id=row.ref) for row in rows]
        return Page(data=data, after=after)

    def _count(self, conn: Connection, expr: Count) -> int:
        spec, term = self._resolve_match(conn, expr.match)
        stmt = select(func.count(index_entries.c.id)).where(
            index_entries.c.index_name == spec.name,
            index_entries.c.term == term,
        )
        return int(conn.execute(stmt).scalar_one() or 0)
