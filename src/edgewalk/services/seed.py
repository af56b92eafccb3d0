"""SeedService — populate the store with sample users, groups, and memberships.

Users ``1..users`` and groups ``1..groups`` are created with sequential
ids.  Edges pick a random user and a random group; a pair that was
already drawn is rejected by the ``edge_user_group`` unique index and
reported as a warning, so the number of stored edges can be lower than
requested.  Pass ``seed`` for a reproducible draw.
"""

from __future__ import annotations

import logging
import random

from edgewalk.domain.entities import Collection, Edge, Group, User
from edgewalk.domain.errors import ConstraintViolation, EdgewalkError
from edgewalk.infrastructure.store.expressions import Create
from edgewalk.services.base import BaseService
from edgewalk.services.result import ServiceResult
from edgewalk.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class SeedService(BaseService):
    """Writes the sample membership data set."""

    @traced
    def seed(
        self,
        *,
        users: int = 100,
        groups: int = 10,
        edges: int = 100,
        seed: int | None = None,
    ) -> ServiceResult:
        op = "seed"
        if users < 1 or groups < 1 or edges < 0:
            return self._invalid(
                op,
                "INVALID_SEED",
                f"users and groups must be positive and edges non-negative "
                f"(got users={users}, groups={groups}, edges={edges})",
            )

        warnings: list[str] = []
        rng = random.Random(seed)
        try:
            with trace_span("users") as span:
                new_users = self._create_all(Collection.USERS, users, User, warnings)
                if span:
                    span.annotate("created", new_users)
            with trace_span("groups") as span:
                new_groups = self._create_all(Collection.GROUPS, groups, Group, warnings)
                if span:
                    span.annotate("created", new_groups)

            created_edges = 0
            duplicates = 0
            with trace_span("edges") as span:
                for i in range(edges):
                    edge = Edge(
                        user_id=rng.randint(1, users),
                        group_id=rng.randint(1, groups),
                    )
                    try:
                        self._store.query(
                            Create(collection=Collection.EDGES, data=edge.model_dump())
                        )
                    except ConstraintViolation as exc:
                        duplicates += 1
                        warnings.append(f"Duplicate edge {edge} rejected by index '{exc.index}'")
                        continue
                    created_edges += 1
                    if (i + 1) % 10 == 0:
                        logger.debug("Seeded edge %d: %s", i + 1, edge)
                if span:
                    span.annotate("created", created_edges)
                    span.annotate("duplicates", duplicates)
        except EdgewalkError as exc:
            return self._error_result(op, exc, warnings=warnings)

        logger.info(
            "Seeded %d users, %d groups, %d edges (%d duplicates)",
            new_users,
            new_groups,
            created_edges,
            duplicates,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "users": new_users,
                "groups": new_groups,
                "edges": created_edges,
                "duplicates": duplicates,
                "seed": seed,
            },
            warnings=warnings,
        )

    def _create_all(
        self,
        collection: Collection,
        count: int,
        record: type[User] | type[Group],
        warnings: list[str],
    ) -> int:
        """Create ids ``1..count`` in *collection*; returns how many were new."""
        created = 0
        existing = 0
        for ident in range(1, count + 1):
            try:
                self._store.query(
                    Create(collection=collection, data=record(id=ident).model_dump())
                )
            except ConstraintViolation:
                existing += 1
                continue
            created += 1
        if existing:
            warnings.append(f"{existing} {collection} already existed and were kept")
        return created
