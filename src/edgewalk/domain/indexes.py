"""Index declarations for traversing the membership relationship.

An :class:`IndexSpec` names a source collection and an ordered tuple of
term field paths.  A field path is a tuple of segments into the stored
document, e.g. ``("data", "user_id")``.  An index with no terms matches
every document of its source (a scan index).

Two single-field edge indexes are kept, one per direction, so that
"groups for a user" and "users for a group" each select their index
directly instead of scanning one composite index twice.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, field_validator

from edgewalk.domain.entities import Collection

FieldPath = tuple[str, ...]


class IndexSpec(BaseModel):
    """Declaration of one secondary index."""

    model_config = {"frozen": True}

    name: str
    source: str
    terms: tuple[FieldPath, ...] = ()
    unique: bool = False

    @field_validator("name", "source")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "must not be blank"
            raise ValueError(msg)
        return value

    @field_validator("terms")
    @classmethod
    def _paths_not_empty(cls, value: tuple[FieldPath, ...]) -> tuple[FieldPath, ...]:
        for path in value:
            if not path or any(not segment for segment in path):
                msg = f"invalid field path {path!r}"
                raise ValueError(msg)
        return value

    @property
    def arity(self) -> int:
        """Number of values a match key must supply."""
        return len(self.terms)


def data_path(field: str) -> FieldPath:
    """Field path into a document's ``data`` object."""
    return ("data", field)


USERS_ALL = "users_all"
GROUPS_ALL = "groups_all"
EDGES_ALL = "edges_all"
EDGES_BY_USER = "edges_user_groups"
EDGES_BY_GROUP = "edges_group_users"
EDGE_UNIQUE = "edge_user_group"
USERS_BY_ID = "users_by_id"
GROUPS_BY_ID = "groups_by_id"

DEFAULT_INDEXES: tuple[IndexSpec, ...] = (
    IndexSpec(name=USERS_ALL, source=Collection.USERS),
    IndexSpec(name=GROUPS_ALL, source=Collection.GROUPS),
    IndexSpec(name=EDGES_ALL, source=Collection.EDGES),
    IndexSpec(name=EDGES_BY_USER, source=Collection.EDGES, terms=(data_path("user_id"),)),
    IndexSpec(name=EDGES_BY_GROUP, source=Collection.EDGES, terms=(data_path("group_id"),)),
    IndexSpec(
        name=EDGE_UNIQUE,
        source=Collection.EDGES,
        terms=(data_path("user_id"), data_path("group_id")),
        unique=True,
    ),
    IndexSpec(name=USERS_BY_ID, source=Collection.USERS, terms=(data_path("id"),), unique=True),
    IndexSpec(name=GROUPS_BY_ID, source=Collection.GROUPS, terms=(data_path("id"),), unique=True),
)


class Direction(StrEnum):
    """Which side of the membership relationship a traversal starts from."""

    USER_GROUPS = "user_groups"
    GROUP_USERS = "group_users"

    @property
    def index_name(self) -> str:
        if self is Direction.USER_GROUPS:
            return EDGES_BY_USER
        return EDGES_BY_GROUP
