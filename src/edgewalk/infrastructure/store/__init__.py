"""Document store: expressions, cursor encoding, and the query evaluator."""

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
    match,
)
from edgewalk.infrastructure.store.store import DocumentStore, extract_term

__all__ = [
    "Count",
    "Create",
    "CreateCollection",
    "CreateIndex",
    "DocumentStore",
    "Expression",
    "Get",
    "GetIndex",
    "Match",
    "Paginate",
    "ResetDatabase",
    "extract_term",
    "match",
]
