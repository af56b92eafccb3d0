"""Query expressions understood by :meth:`DocumentStore.query`.

Expressions are plain frozen values; building one has no effect until it
is handed to the store.  The traversal core only ever builds
:class:`Paginate` over a :class:`Match`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, PositiveInt

from edgewalk.domain.indexes import IndexSpec
from edgewalk.domain.paging import Cursor, Projection, Ref


class Expression(BaseModel):
    """Base class for all store expressions."""

    model_config = {"frozen": True}


class CreateCollection(Expression):
    """Create a collection.  Evaluates to ``True`` if it was created."""

    name: str


class CreateIndex(Expression):
    """Create and backfill an index.  Evaluates to the stored :class:`IndexSpec`."""

    spec: IndexSpec


class GetIndex(Expression):
    """Look up an index definition by name."""

    name: str


class Create(Expression):
    """Insert a document into a collection.  Evaluates to its :class:`Ref`."""

    collection: str
    data: dict[str, Any]


class Get(Expression):
    """Fetch one document.  Evaluates to ``{"ref": Ref, "data": {...}}``."""

    ref: Ref


class Match(Expression):
    """Select the entries of *index* whose key equals *terms*.

    ``terms=None`` selects every entry of an index declared without terms.
    """

    index: str
    terms: tuple[Any, ...] | None = None


class Paginate(Expression):
    """One page of a :class:`Match`, optionally resuming at *after*."""

    match: Match
    size: PositiveInt = 64
    after: Cursor | None = None
    projection: Projection = Projection.REFS


class Count(Expression):
    """Number of entries selected by a :class:`Match`."""

    match: Match


class ResetDatabase(Expression):
    """Drop every collection, index, and document."""


def match(index: str, key: Any = None) -> Match:
    """Build a :class:`Match`, wrapping a scalar *key* as a one-value term tuple.

    Examples:
        >>> match("edges_user_groups", 6).terms
        (6,)
        >>> match("edge_user_group", (6, 3)).terms
        (6, 3)
        >>> match("edges_all").terms is None
        True
    """
    if key is None:
        return Match(index=index)
    if isinstance(key, (tuple, list)):
        return Match(index=index, terms=tuple(key))
    return Match(index=index, terms=(key,))
