"""TraverseService — run a traversal and report it as a ServiceResult.

The record type is chosen from the index's source collection, so any
declared index can be walked.  ``limit`` stops at the first page boundary
at or past the limit, never mid-page, so the reported ``next_cursor``
resumes exactly where the returned items end.

A store failure part-way through returns ``STORE_UNAVAILABLE`` with the
items read so far in ``data`` and the last good cursor in
``error.detail.cursor``.  Any failure leaves ``data.state`` at
``failed`` with ``data.next_cursor`` at the start of the page that failed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from edgewalk.config.logging import traversal_context
from edgewalk.config.models import PagingConfig
from edgewalk.domain.entities import RECORD_TYPES
from edgewalk.domain.errors import EdgewalkError
from edgewalk.domain.indexes import Direction
from edgewalk.domain.paging import Cursor
from edgewalk.infrastructure.store.expressions import Count, GetIndex, match
from edgewalk.services.base import BaseService
from edgewalk.services.result import ServiceResult
from edgewalk.services.telemetry import trace_span, traced
from edgewalk.traversal.client import TraversalClient

if TYPE_CHECKING:
    from pydantic import BaseModel

    from edgewalk.infrastructure.store.store import DocumentStore
    from edgewalk.traversal.client import Traversal


class TraverseService(BaseService):
    """Walks indexes page by page on behalf of the CLI."""

    def __init__(self, store: DocumentStore, paging: PagingConfig | None = None) -> None:
        super().__init__(store)
        self._paging = paging or PagingConfig()

    @traced
    def traverse(
        self,
        index_name: str,
        key: Any = None,
        *,
        page_size: int | None = None,
        after: str | None = None,
        limit: int | None = None,
    ) -> ServiceResult:
        """Read every entry of *index_name* matching *key*.

        Args:
            index_name: Declared index to walk.
            key: Match term; a tuple for compound indexes, None for scans.
            page_size: Entries per store request (default from config).
            after: Cursor token from an earlier result to resume from.
            limit: Stop once at least this many items were read.
        """
        op = "traverse"
        size = self._paging.page_size if page_size is None else page_size
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            return self._invalid(op, "INVALID_PAGE_SIZE", f"page size must be positive, got {size!r}")
        if size > self._paging.max_page_size:
            return self._invalid(
                op,
                "INVALID_PAGE_SIZE",
                f"page size {size} exceeds the maximum of {self._paging.max_page_size}",
            )
        if limit is not None and limit < 1:
            return self._invalid(op, "INVALID_LIMIT", f"limit must be positive, got {limit}")

        try:
            spec = self._store.query(GetIndex(name=index_name))
        except EdgewalkError as exc:
            return self._error_result(op, exc)

        record = RECORD_TYPES.get(spec.source)
        if record is None:
            return self._invalid(
                op,
                "UNSUPPORTED_INDEX",
                f"Index '{index_name}' sources '{spec.source}', which has no record type",
            )

        client = TraversalClient(self._store, page_size=size)
        cursor = Cursor(token=after) if after else None
        traversal = client.traverse(index_name, key, record=record, after=cursor)
        return self._run(op, traversal, limit=limit)

    def related(self, direction: Direction, key: int, **kwargs: Any) -> ServiceResult:
        """Traverse one side of the membership relationship.

        Adds ``related_ids``: group ids for ``USER_GROUPS``, user ids for
        ``GROUP_USERS``.
        """
        result = self.traverse(direction.index_name, key, **kwargs)
        if not result.ok:
            return result
        field = "group_id" if direction is Direction.USER_GROUPS else "user_id"
        related_ids = [item[field] for item in result.data["items"]]
        return result.model_copy(
            update={
                "op": direction.value,
                "data": {**result.data, "direction": direction.value, "related_ids": related_ids},
            }
        )

    def groups_for_user(self, user_id: int, **kwargs: Any) -> ServiceResult:
        return self.related(Direction.USER_GROUPS, user_id, **kwargs)

    def users_for_group(self, group_id: int, **kwargs: Any) -> ServiceResult:
        return self.related(Direction.GROUP_USERS, group_id, **kwargs)

    @traced
    def count(self, index_name: str, key: Any = None) -> ServiceResult:
        """Number of entries *key* matches in *index_name*."""
        op = "count"
        try:
            total = self._store.query(Count(match=match(index_name, key)))
        except EdgewalkError as exc:
            return self._error_result(op, exc)
        return ServiceResult(ok=True, op=op, data={"index": index_name, "key": key, "count": total})

    def _run(self, op: str, traversal: Traversal[BaseModel], *, limit: int | None) -> ServiceResult:
        items: list[dict[str, Any]] = []
        pages = traversal.pages()
        try:
            while limit is None or len(items) < limit:
                page_no = traversal.pages_fetched + 1
                with (
                    trace_span("page") as span,
                    traversal_context(traversal.index_name, traversal.match_key, page=page_no),
                ):
                    page = next(pages, None)
                    if span and page is not None:
                        span.annotate("entries", len(page.records))
                if page is None:
                    break
                items.extend(record.model_dump() for record in page.records)
        except EdgewalkError as exc:
            return self._error_result(op, exc, data=self._summary(traversal, items))
        return ServiceResult(ok=True, op=op, data=self._summary(traversal, items))

    @staticmethod
    def _summary(traversal: Traversal[BaseModel], items: list[dict[str, Any]]) -> dict[str, Any]:
        return {
            "index": traversal.index_name,
            "key": traversal.match_key,
            "count": len(items),
            "pages": traversal.pages_fetched,
            "items": items,
            "next_cursor": traversal.cursor.token if traversal.cursor is not None else None,
            "state": str(traversal.state),
        }
