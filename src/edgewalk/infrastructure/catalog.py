"""IndexCatalog — declare the indexes traversal and deduplication depend on.

Declaring is idempotent: an index that already exists with the same
definition is left alone.  An index that exists under the same name with
a different definition is a configuration error and is never patched or
retried here; the declaration must be fixed and setup re-run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from edgewalk.domain.errors import ConfigurationError, IndexNotFound
from edgewalk.infrastructure.store.expressions import CreateIndex, GetIndex

if TYPE_CHECKING:
    from edgewalk.domain.indexes import IndexSpec
    from edgewalk.infrastructure.store.store import DocumentStore

logger = logging.getLogger(__name__)


@dataclass
class CatalogReport:
    """Outcome of one :meth:`IndexCatalog.ensure_indexes` call."""

    created: list[str] = field(default_factory=list)
    existing: list[str] = field(default_factory=list)


class IndexCatalog:
    """Creates missing indexes against an explicit store handle."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def ensure_indexes(self, specs: Iterable[IndexSpec]) -> CatalogReport:
        """Create each index in *specs* that does not exist yet.

        Raises:
            ConfigurationError: An index of the same name exists with a
                different source, terms, or uniqueness, or existing
                documents violate a new unique index.
        """
        report = CatalogReport()
        for spec in specs:
            if self.ensure_index(spec):
                report.created.append(spec.name)
            else:
                report.existing.append(spec.name)
        return report

    def ensure_index(self, spec: IndexSpec) -> bool:
        """Create *spec* if absent.  Returns ``True`` if it was created."""
        try:
            current = self._store.query(GetIndex(name=spec.name))
        except IndexNotFound:
            self._store.query(CreateIndex(spec=spec))
            logger.info("Created index %s on %s", spec.name, spec.source)
            return True

        if current != spec:
            msg = (
                f"Index '{spec.name}' exists with an incompatible definition: "
                f"declared {_describe(spec)}, found {_describe(current)}"
            )
            raise ConfigurationError(msg)
        logger.debug("Index %s already present", spec.name)
        return False


def _describe(spec: IndexSpec) -> str:
    terms = ", ".join(".".join(path) for path in spec.terms) or "<all>"
    unique = " unique" if spec.unique else ""
    return f"{spec.source}({terms}){unique}"
