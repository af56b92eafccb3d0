"""TraversalClient — follow one index match to completion as decoded records.

The client hides pagination: callers iterate records and the pages behind
them are fetched on demand.  Each page is decoded as a whole before any of
its records is handed out, so a malformed entry fails the traversal with
:class:`DecodeError` and none of that page's records are yielded.

A :class:`Traversal` is single-use.  Once exhausted (or failed) further
iteration yields nothing; start a new traversal to read again, passing
``after=`` to resume from a cursor.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from edgewalk.domain.entities import Edge
from edgewalk.domain.errors import DecodeError
from edgewalk.domain.indexes import Direction
from edgewalk.domain.paging import Cursor, Projection
from edgewalk.traversal.pager import CursorPager, Pagination, PagerState, validate_page_size

if TYPE_CHECKING:
    from edgewalk.infrastructure.store.store import DocumentStore

R = TypeVar("R", bound=BaseModel)

DEFAULT_PAGE_SIZE = 16


@dataclass(frozen=True)
class DecodedPage(Generic[R]):
    """One page of decoded records and the cursor for the page after it."""

    records: list[R]
    after: Cursor | None


def decode_page(record: type[R], entries: list[Any]) -> list[R]:
    """Decode every entry of a page, or fail on the first malformed one."""
    decoded: list[R] = []
    for entry in entries:
        try:
            decoded.append(record.model_validate(entry))
        except ValidationError as exc:
            reason = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            )
            raise DecodeError(record.__name__, entry, reason) from exc
    return decoded


class Traversal(Generic[R]):
    """Lazy, finite, single-use iterator over decoded records."""

    def __init__(self, pagination: Pagination, record: type[R]) -> None:
        self._pagination = pagination
        self._record = record
        self._buffer: deque[R] = deque()
        self._pages = self._decoded_pages()

    @property
    def index_name(self) -> str:
        return self._pagination.index_name

    @property
    def match_key(self) -> Any:
        return self._pagination.match_key

    @property
    def state(self) -> PagerState:
        return self._pagination.state

    @property
    def cursor(self) -> Cursor | None:
        """Last good cursor: where a new traversal would resume.

        After a :class:`DecodeError` this is the start of the rejected page.
        """
        return self._pagination.cursor

    @property
    def pages_fetched(self) -> int:
        return self._pagination.pages_fetched

    def _decoded_pages(self) -> Iterator[DecodedPage[R]]:
        pagination = self._pagination
        while not pagination.finished:
            start = pagination.cursor
            page = pagination.fetch()
            try:
                records = decode_page(self._record, page.data)
            except DecodeError:
                pagination.fail(start)
                raise
            yield DecodedPage(records=records, after=page.after)

    def pages(self) -> Iterator[DecodedPage[R]]:
        """Iterate the remaining pages instead of individual records.

        Continues from the next page not yet fetched; records already
        buffered by record iteration are not repeated here.
        """
        return self._pages

    def __iter__(self) -> Iterator[R]:
        return self

    def __next__(self) -> R:
        while not self._buffer:
            page = next(self._pages)
            self._buffer.extend(page.records)
        return self._buffer.popleft()

    def collect(self) -> list[R]:
        """Materialize every remaining record."""
        return list(self)


class TraversalClient:
    """Composes a :class:`CursorPager` with an index and a match key."""

    def __init__(self, store: DocumentStore, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._pager = CursorPager(store, projection=Projection.DATA)
        self._page_size = validate_page_size(page_size)

    @property
    def page_size(self) -> int:
        return self._page_size

    def traverse(
        self,
        index_name: str,
        match_key: Any = None,
        *,
        record: type[R] = Edge,  # type: ignore[assignment]
        page_size: int | None = None,
        after: Cursor | None = None,
    ) -> Traversal[R]:
        """Start a traversal of *index_name* for *match_key*.

        No request is made until the first record (or page) is pulled.

        Raises:
            ValueError: *page_size* is not a positive integer.
        """
        size = self._page_size if page_size is None else validate_page_size(page_size)
        pagination = self._pager.paginate(index_name, match_key, size, after=after)
        return Traversal(pagination, record)

    def related(self, direction: Direction, key: int, **kwargs: Any) -> Traversal[Edge]:
        """Edges on one side of the membership relationship."""
        return self.traverse(direction.index_name, key, record=Edge, **kwargs)

    def groups_for_user(self, user_id: int, **kwargs: Any) -> Traversal[Edge]:
        """Membership edges of *user_id*, in index order."""
        return self.related(Direction.USER_GROUPS, user_id, **kwargs)

    def users_for_group(self, group_id: int, **kwargs: Any) -> Traversal[Edge]:
        """Membership edges into *group_id*, in index order."""
        return self.related(Direction.GROUP_USERS, group_id, **kwargs)

    def scan(self, index_name: str, record: type[R], **kwargs: Any) -> Traversal[R]:
        """Every document of a term-less index, decoded as *record*."""
        return self.traverse(index_name, None, record=record, **kwargs)
