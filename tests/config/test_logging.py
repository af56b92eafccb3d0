"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from edgewalk.config.logging import NOISY_LOGGERS, configure_logging, traversal_context


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    edgewalk = logging.getLogger("edgewalk")
    edgewalk_level = edgewalk.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    edgewalk.setLevel(edgewalk_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("edgewalk").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("edgewalk").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("edgewalk.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "edgewalk.test"
        assert "timestamp" in parsed

    def test_stdlib_pager_logger_is_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("edgewalk.traversal.pager").debug("Fetched page %d of %s", 2, "edges_all")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Fetched page 2 of edges_all"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "edgewalk.traversal.pager"

    def test_quiet_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("edgewalk.services.seed").info("Seeded 1 users")
        logging.getLogger("sqlalchemy.engine").info("SELECT 1")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_sql_stays_quiet_when_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
        logging.getLogger("sqlalchemy.engine.Engine").info("SELECT 1")
        assert capfd.readouterr().err == ""


class TestTraversalContext:
    def test_binds_index_key_and_page(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with traversal_context("edges_user_groups", 6, page=3):
            logging.getLogger("edgewalk.traversal.pager").debug("Fetched page")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["index"] == "edges_user_groups"
        assert parsed["key"] == 6
        assert parsed["page"] == 3

    def test_unbinds_on_exit(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with traversal_context("edges_all"):
            pass
        logging.getLogger("edgewalk.traversal.pager").debug("after")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert "index" not in parsed
