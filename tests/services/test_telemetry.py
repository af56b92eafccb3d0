"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from edgewalk.infrastructure.store import DocumentStore
from edgewalk.services.result import ServiceError, ServiceResult
from edgewalk.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)
from tests.conftest import link_all


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


# ── Span unit tests ──────────────────────────────────────────────────


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        span = Span(name="test")
        assert span.duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "duration_ms" in d
        assert "children" not in d
        assert "annotations" not in d

    def test_end_is_idempotent(self) -> None:
        span = Span(name="page")
        span.end()
        first = span.duration_ms
        time.sleep(0.002)
        span.end()
        assert span.duration_ms == first

    def test_annotate(self) -> None:
        span = Span(name="page")
        span.annotate("entries", 16)
        span.end()
        assert span.to_dict()["annotations"] == {"entries": 16}


# ── trace_span tests ─────────────────────────────────────────────────


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("test") as span:
            assert span is None

    def test_no_root_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("test") as span:
            assert span is None

    def test_nested_spans(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            with trace_span("a"):
                with trace_span("b"):
                    pass
            assert root.children[0].name == "a"
            assert root.children[0].children[0].name == "b"
            assert root.children[0].finished
        finally:
            _current_span.reset(token)


# ── @traced decorator tests ──────────────────────────────────────────


class TestTracedDecorator:
    def test_noop_when_disabled(self) -> None:
        @traced
        def my_func() -> ServiceResult:
            return ServiceResult(ok=True, op="test")

        assert my_func().meta is None

    def test_injects_meta_when_enabled(self) -> None:
        @traced
        def my_func() -> ServiceResult:
            with trace_span("stage"):
                pass
            return ServiceResult(ok=True, op="test", meta={"existing": "data"})

        enable_telemetry()
        result = my_func()
        assert result.meta is not None
        assert result.meta["existing"] == "data"
        assert result.meta["telemetry"]["name"].endswith("my_func")
        assert result.meta["telemetry"]["children"][0]["name"] == "stage"

    def test_error_result_gets_telemetry(self) -> None:
        @traced
        def my_func() -> ServiceResult:
            return ServiceResult(ok=False, op="test", error=ServiceError(code="X", message="x"))

        enable_telemetry()
        result = my_func()
        assert result.meta is not None
        assert "telemetry" in result.meta

    def test_exception_propagates(self) -> None:
        @traced
        def my_func() -> ServiceResult:
            msg = "boom"
            raise ValueError(msg)

        enable_telemetry()
        with pytest.raises(ValueError, match="boom"):
            my_func()
        assert _current_span.get() is None


class TestGetCurrentSpan:
    def test_returns_none_when_disabled(self) -> None:
        assert get_current_span() is None

    def test_returns_span_when_enabled(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            assert get_current_span() is root
        finally:
            _current_span.reset(token)


# ── Spans in real services ───────────────────────────────────────────


class TestTraceSpanInServices:
    def test_traverse_has_page_spans(self, store: DocumentStore) -> None:
        from edgewalk.services.traverse import TraverseService

        link_all(store, [(6, g) for g in range(1, 6)])
        enable_telemetry()
        result = TraverseService(store).groups_for_user(6, page_size=2)
        assert result.ok
        assert result.meta is not None
        tel = result.meta["telemetry"]
        assert "TraverseService.traverse" in tel["name"]
        annotated = [c for c in tel["children"] if c["name"] == "page" and "annotations" in c]
        assert [c["annotations"]["entries"] for c in annotated] == [2, 2, 1]

    def test_seed_has_stage_spans(self, store: DocumentStore) -> None:
        from edgewalk.services.seed import SeedService

        enable_telemetry()
        result = SeedService(store).seed(users=3, groups=2, edges=4, seed=5)
        assert result.ok
        assert result.meta is not None
        names = [c["name"] for c in result.meta["telemetry"]["children"]]
        assert names == ["users", "groups", "edges"]
