"""Tests for configuration section models."""

import pytest
from pydantic import ValidationError

from edgewalk.config.models import PagingConfig, SeedConfig, StoreConfig


class TestDefaults:
    def test_sections(self) -> None:
        assert StoreConfig().path == "edgewalk.db"
        assert StoreConfig().busy_timeout == 5.0
        assert PagingConfig().page_size == 16
        assert PagingConfig().max_page_size == 1000
        seed = SeedConfig()
        assert (seed.users, seed.groups, seed.edges, seed.seed) == (100, 10, 100, None)


class TestValidation:
    def test_page_size_above_max(self) -> None:
        with pytest.raises(ValidationError, match="exceeds max_page_size"):
            PagingConfig(page_size=50, max_page_size=10)

    def test_busy_timeout_positive(self) -> None:
        with pytest.raises(ValidationError):
            StoreConfig(busy_timeout=0)

    def test_negative_edges(self) -> None:
        with pytest.raises(ValidationError):
            SeedConfig(edges=-1)

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            PagingConfig().page_size = 3  # type: ignore[misc]
