"""Shared pytest fixtures and test helpers for edgewalk tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from edgewalk.infrastructure.database.engine import init_database
from edgewalk.infrastructure.store.store import DocumentStore
from edgewalk.services.seed import SeedService
from edgewalk.services.setup import SetupService
from edgewalk.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo logging and telemetry changes made by CLI invocations."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("edgewalk").setLevel(logging.NOTSET)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "edgewalk.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def raw_store(db_engine: Engine) -> DocumentStore:
    """Document store with no collections or indexes declared."""
    return DocumentStore(db_engine)


@pytest.fixture
def store(raw_store: DocumentStore) -> DocumentStore:
    """Document store with the membership collections and default indexes."""
    result = SetupService(raw_store).setup()
    assert result.ok, result.error
    return raw_store


@pytest.fixture
def seeded_store(store: DocumentStore) -> DocumentStore:
    """The default sample data set: 100 users, 10 groups, 100 random edges."""
    result = SeedService(store).seed(users=100, groups=10, edges=100, seed=1234)
    assert result.ok, result.error
    return store


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory with no edgewalk env overrides.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    for name in ("EDGEWALK_CONFIG", "EDGEWALK_ROOT", "EDGEWALK_STORE__PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def link_all(store: DocumentStore, pairs: list[tuple[int, int]]) -> None:
    """Create users, groups, and the given (user, group) edges."""
    from edgewalk.services.membership import MembershipService

    svc = MembershipService(store)
    for user_id in sorted({u for u, _ in pairs}):
        assert svc.add_user(user_id).ok
    for group_id in sorted({g for _, g in pairs}):
        assert svc.add_group(group_id).ok
    for user_id, group_id in pairs:
        result = svc.link(user_id, group_id)
        assert result.ok, result.error
