"""Exception hierarchy shared by the store, the pager, and the traversal client.

Store-side failures derive from :class:`StoreError`; traversal-side
failures derive from :class:`TraversalError`.  The two kinds a traversal
caller can see from the store (``StoreUnavailable`` and ``IndexNotFound``)
belong to both branches so ``except TraversalError`` covers every way a
``traverse()`` call can fail.

Nothing in the pager or client catches these to retry.  Retry policy is
the caller's decision.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from edgewalk.domain.paging import Cursor


class EdgewalkError(Exception):
    """Root of all edgewalk errors."""

    code = "EDGEWALK_ERROR"


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------


class StoreError(EdgewalkError):
    """A classified failure reported by the document store."""

    code = "STORE_ERROR"


class TraversalError(EdgewalkError):
    """A failure while walking an index."""

    code = "TRAVERSAL_ERROR"


class StoreUnavailable(StoreError, TraversalError):
    """Transient connectivity or timeout failure talking to the store.

    When raised out of a pagination, ``cursor`` holds the last cursor that
    was successfully obtained (``None`` if the failure hit the first page),
    so a fresh pagination can resume without loss.
    """

    code = "STORE_UNAVAILABLE"

    def __init__(self, message: str, *, cursor: Cursor | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


class Unauthorized(StoreError):
    """The store rejected the caller's credentials."""

    code = "UNAUTHORIZED"


class NotFound(StoreError):
    """A referenced document or collection does not exist."""

    code = "NOT_FOUND"


class IndexNotFound(StoreError, TraversalError):
    """The named index has not been declared."""

    code = "INDEX_NOT_FOUND"

    def __init__(self, name: str) -> None:
        super().__init__(f"Index '{name}' does not exist")
        self.name = name


class ConfigurationError(StoreError):
    """An index or collection was declared with an incompatible shape."""

    code = "CONFIGURATION_ERROR"


class ConstraintViolation(StoreError):
    """A write would create a second entry for the same key in a unique index."""

    code = "CONSTRAINT_VIOLATION"

    def __init__(self, index: str, key: Any) -> None:
        super().__init__(f"Duplicate key {key!r} rejected by unique index '{index}'")
        self.index = index
        self.key = key


# ---------------------------------------------------------------------------
# Traversal errors
# ---------------------------------------------------------------------------


class DecodeError(TraversalError):
    """A page entry does not match the expected record shape."""

    code = "DECODE_ERROR"

    def __init__(self, record: str, entry: Any, reason: str) -> None:
        super().__init__(f"Cannot decode {entry!r} as {record}: {reason}")
        self.record = record
        self.entry = entry
        self.reason = reason


class PaginationExhausted(TraversalError):
    """A page was requested after the pagination reached DONE or FAILED."""

    code = "PAGINATION_EXHAUSTED"
