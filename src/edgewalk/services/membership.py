"""MembershipService — write single users, groups, and membership edges.

Duplicate edges are rejected by the store's ``edge_user_group`` unique
index and come back as ``CONSTRAINT_VIOLATION``; the existing edge is
left untouched.
"""

from __future__ import annotations

from edgewalk.domain.entities import Collection, Edge, Group, User
from edgewalk.domain.errors import EdgewalkError
from edgewalk.domain.indexes import GROUPS_BY_ID, USERS_BY_ID
from edgewalk.infrastructure.store.expressions import Count, Create, match
from edgewalk.services.base import BaseService
from edgewalk.services.result import ServiceError, ServiceResult
from edgewalk.services.telemetry import traced


class MembershipService(BaseService):
    """Creates membership records one at a time."""

    @traced
    def add_user(self, user_id: int) -> ServiceResult:
        return self._create("add_user", Collection.USERS, User(id=user_id).model_dump())

    @traced
    def add_group(self, group_id: int) -> ServiceResult:
        return self._create("add_group", Collection.GROUPS, Group(id=group_id).model_dump())

    @traced
    def link(self, user_id: int, group_id: int) -> ServiceResult:
        """Add *user_id* to *group_id*.

        Both ends must already exist.  A second link for the same pair
        fails with ``CONSTRAINT_VIOLATION``.
        """
        op = "link"
        try:
            missing = [
                f"{kind} {ident}"
                for kind, index, ident in (
                    ("user", USERS_BY_ID, user_id),
                    ("group", GROUPS_BY_ID, group_id),
                )
                if self._store.query(Count(match=match(index, ident))) == 0
            ]
        except EdgewalkError as exc:
            return self._error_result(op, exc)

        if missing:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="NOT_FOUND",
                    message=f"Cannot link missing {' and '.join(missing)}",
                    detail={"missing": missing},
                ),
            )

        edge = Edge(user_id=user_id, group_id=group_id)
        return self._create(op, Collection.EDGES, edge.model_dump())

    def _create(self, op: str, collection: Collection, data: dict[str, int]) -> ServiceResult:
        try:
            ref = self._store.query(Create(collection=collection, data=data))
        except EdgewalkError as exc:
            return self._error_result(op, exc)
        return ServiceResult(ok=True, op=op, data={"ref": str(ref), **data})
