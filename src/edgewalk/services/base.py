"""BaseService — abstract foundation for all edgewalk services.

Every service receives the :class:`DocumentStore` handle at construction
time; there is no module-level store.  Services catch the classified
edgewalk exceptions raised below them and return them as failed
:class:`ServiceResult` objects.  Anything else propagates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from edgewalk.domain.errors import EdgewalkError
from edgewalk.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from edgewalk.infrastructure.store.store import DocumentStore

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class SetupService(BaseService):
            def setup(self) -> ServiceResult:
                self._store.query(...)
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @staticmethod
    def _error_result(
        op: str,
        exc: EdgewalkError,
        *,
        warnings: list[str] | None = None,
        data: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Convert a classified exception into a failed ServiceResult."""
        logger.debug("%s failed with %s", op, exc.code, exc_info=exc)
        return ServiceResult(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError.from_exception(exc),
        )

    @staticmethod
    def _invalid(op: str, code: str, message: str) -> ServiceResult:
        """Failed result for input rejected before reaching the store."""
        return ServiceResult(ok=False, op=op, error=ServiceError(code=code, message=message))

