"""Timing spans for verbose runs.

``-v`` switches telemetry on.  Each ``@traced`` service call then opens a
root span, :func:`trace_span` opens children under whichever span is
current (a traversal opens one per page, a seed run one per collection),
and the finished tree is attached to the result as ``meta["telemetry"]``.
Switched off, both cost one ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from edgewalk.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("edgewalk_telemetry", default=False)
_current_span: ContextVar[Span | None] = ContextVar("edgewalk_span", default=None)

log = structlog.get_logger("edgewalk.telemetry")


@dataclass
class Span:
    """One timed stage and the stages nested inside it."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    _started: float = field(default_factory=time.perf_counter, repr=False)
    _elapsed: float | None = field(default=None, repr=False)

    @property
    def finished(self) -> bool:
        return self._elapsed is not None

    @property
    def duration_ms(self) -> float:
        """Elapsed time, or 0.0 while the span is still open."""
        return 0.0 if self._elapsed is None else self._elapsed * 1000

    def end(self) -> None:
        if self._elapsed is None:
            self._elapsed = time.perf_counter() - self._started

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            tree["annotations"] = dict(self.annotations)
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


@contextmanager
def _active(span: Span) -> Iterator[Span]:
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a stage under the current span.

    Yields None when telemetry is off or no ``@traced`` call is running.
    """
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name)
    parent.children.append(child)
    with _active(child):
        yield child


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the returned result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(func.__qualname__)
        ok = False
        try:
            with _active(span):
                result = func(*args, **kwargs)
            ok = not isinstance(result, ServiceResult) or result.ok
        finally:
            log.debug(
                "span.complete",
                span_name=span.name,
                duration_ms=round(span.duration_ms, 2),
                ok=ok,
                children=len(span.children),
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on for the current context (``-v``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The span stages should annotate, or None when telemetry is off."""
    return _current_span.get() if _enabled.get() else None
