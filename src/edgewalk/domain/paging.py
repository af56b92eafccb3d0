"""Value types exchanged between the store and the pager.

INVARIANT: a :class:`Cursor` is opaque.  Only the store encodes and
decodes its token; everything above the store passes it through unchanged.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class Cursor(BaseModel):
    """Resumption token marking a position in an index's result ordering."""

    model_config = {"frozen": True}

    token: str

    def __str__(self) -> str:
        return self.token


class Ref(BaseModel):
    """Reference to a stored document."""

    model_config = {"frozen": True}

    collection: str
    id: int

    def __str__(self) -> str:
        return f"{self.collection}/{self.id}"


class Projection(StrEnum):
    """What a page carries for each matching index entry."""

    REFS = "refs"
    DATA = "data"


class Page(BaseModel):
    """A bounded batch of index entries plus an optional next-page cursor.

    ``after`` is ``None`` on the final page.  That absence is the only
    termination signal a pagination honours.
    """

    model_config = {"frozen": True}

    data: list[Any] = Field(default_factory=list)
    after: Cursor | None = None

    @property
    def is_last(self) -> bool:
        return self.after is None
