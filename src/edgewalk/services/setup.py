"""SetupService — create the membership collections and declare their indexes.

Setup is idempotent: collections and indexes that already exist are left
alone.  An index declared under an existing name with a different shape
fails the whole setup with ``CONFIGURATION_ERROR``; it is never retried
or patched, since only an operator can decide which definition is right.
"""

from __future__ import annotations

from collections.abc import Iterable

from edgewalk.domain.entities import Collection
from edgewalk.domain.errors import EdgewalkError
from edgewalk.domain.indexes import DEFAULT_INDEXES, IndexSpec
from edgewalk.infrastructure.catalog import IndexCatalog
from edgewalk.infrastructure.store.expressions import CreateCollection, GetIndex, ResetDatabase
from edgewalk.services.base import BaseService
from edgewalk.services.result import ServiceResult
from edgewalk.services.telemetry import traced


class SetupService(BaseService):
    """Bootstraps a store for membership traversal."""

    @traced
    def setup(
        self,
        *,
        reset: bool = False,
        specs: Iterable[IndexSpec] = DEFAULT_INDEXES,
    ) -> ServiceResult:
        """Create collections and ensure *specs*.

        Args:
            reset: Wipe every collection, index, and document first.
            specs: Index declarations to ensure.
        """
        op = "setup"
        try:
            if reset:
                self._store.query(ResetDatabase())

            created_collections = [
                str(name)
                for name in Collection
                if self._store.query(CreateCollection(name=name))
            ]
            report = IndexCatalog(self._store).ensure_indexes(specs)
        except EdgewalkError as exc:
            return self._error_result(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "reset": reset,
                "collections_created": created_collections,
                "indexes_created": report.created,
                "indexes_existing": report.existing,
            },
        )

    def describe_index(self, name: str) -> ServiceResult:
        """Return the stored definition of index *name*."""
        op = "describe_index"
        try:
            spec = self._store.query(GetIndex(name=name))
        except EdgewalkError as exc:
            return self._error_result(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "name": spec.name,
                "source": spec.source,
                "terms": [".".join(path) for path in spec.terms],
                "unique": spec.unique,
            },
        )
