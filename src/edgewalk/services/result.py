"""ServiceResult and ServiceError: what every service method returns.

Classified edgewalk exceptions become a :class:`ServiceError` here, with
the fields a caller needs to act on them (the resume cursor of a failed
traversal, the index and key of a duplicate) pulled into ``detail``.
The CLI only ever sees a :class:`ServiceResult`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from edgewalk.domain.errors import (
    ConstraintViolation,
    DecodeError,
    EdgewalkError,
    IndexNotFound,
    StoreUnavailable,
)


def error_detail(exc: EdgewalkError) -> dict[str, Any]:
    """Structured fields a caller needs to act on *exc*."""
    if isinstance(exc, StoreUnavailable):
        return {"cursor": exc.cursor.token if exc.cursor is not None else None}
    if isinstance(exc, ConstraintViolation):
        return {"index": exc.index, "key": list(exc.key)}
    if isinstance(exc, IndexNotFound):
        return {"index": exc.name}
    if isinstance(exc, DecodeError):
        return {"record": exc.record, "entry": exc.entry, "reason": exc.reason}
    return {}


class ServiceError(BaseModel):
    """Error code, message, and structured detail of a failed operation."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: EdgewalkError) -> ServiceError:
        return cls(code=exc.code, message=str(exc), detail=error_detail(exc))


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    ``data`` is filled on failure too when there is something to report,
    e.g. the records a traversal read before its store went away.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @property
    def resume_cursor(self) -> str | None:
        """Cursor token to continue a traversal from, if there is one."""
        if self.error is not None and self.error.detail.get("cursor"):
            return self.error.detail["cursor"]
        return self.data.get("next_cursor")
