"""Record kinds stored in the document store.

Three collections model the "users belong to groups" relationship:

- ``users``  — one document per :class:`User`
- ``groups`` — one document per :class:`Group`
- ``edges``  — one join document per membership (:class:`Edge`)

Models are strict and frozen: a document whose ``data`` does not carry
integer identity fields fails validation instead of being coerced.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class Collection(StrEnum):
    """Collections (document classes) used by the membership model."""

    USERS = "users"
    GROUPS = "groups"
    EDGES = "edges"


class User(BaseModel):
    """A user, identified by an integer unique within ``users``."""

    model_config = {"frozen": True, "strict": True}

    id: int


class Group(BaseModel):
    """A group, identified by an integer unique within ``groups``."""

    model_config = {"frozen": True, "strict": True}

    id: int


class Edge(BaseModel):
    """Membership of one user in one group.

    The ``(user_id, group_id)`` pair is unique, enforced by the store's
    ``edge_user_group`` index rather than by this model.
    """

    model_config = {"frozen": True, "strict": True}

    user_id: int
    group_id: int

    def __str__(self) -> str:
        return f"{self.user_id} -> {self.group_id}"


RECORD_TYPES: dict[str, type[BaseModel]] = {
    Collection.USERS: User,
    Collection.GROUPS: Group,
    Collection.EDGES: Edge,
}
