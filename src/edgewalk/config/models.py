"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, edgewalk.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, PositiveInt, model_validator


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    path: str = "edgewalk.db"
    busy_timeout: float = Field(default=5.0, gt=0)


class PagingConfig(BaseModel):
    """[paging] section."""

    model_config = {"frozen": True}

    page_size: PositiveInt = 16
    max_page_size: PositiveInt = 1000

    @model_validator(mode="after")
    def _page_size_within_max(self) -> PagingConfig:
        if self.page_size > self.max_page_size:
            msg = f"page_size {self.page_size} exceeds max_page_size {self.max_page_size}"
            raise ValueError(msg)
        return self


class SeedConfig(BaseModel):
    """[seed] section — sample data sizes."""

    model_config = {"frozen": True}

    users: PositiveInt = 100
    groups: PositiveInt = 10
    edges: int = Field(default=100, ge=0)
    seed: int | None = None
