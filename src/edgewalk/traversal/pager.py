"""Cursor pager — walk one index match in bounded-size pages.

A :class:`Pagination` is a small state machine over a single match::

    START ──► FETCHING ──► HAS_MORE ──► FETCHING ──► … ──► DONE
                  │                         │
                  └──────────► FAILED ◄─────┘

Each fetch forwards the cursor the previous page returned.  A page with no
``after`` cursor moves the pagination to DONE, and no further request is
issued.  A store failure moves it to FAILED without advancing the cursor,
and the raised :class:`StoreUnavailable` carries that last good cursor so
the caller can start a fresh pagination from it.  Any other exception
raised during a fetch, an interrupt included, also leaves it FAILED.

Pages are fetched strictly one after another: page N+1 cannot be requested
before page N has returned its cursor, so there is no prefetching.  The
pager never retries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from edgewalk.domain.errors import PaginationExhausted, StoreUnavailable
from edgewalk.domain.paging import Cursor, Page, Projection
from edgewalk.infrastructure.store.expressions import Paginate, match

if TYPE_CHECKING:
    from edgewalk.infrastructure.store.store import DocumentStore

logger = logging.getLogger(__name__)


class PagerState(StrEnum):
    """Lifecycle of a single pagination."""

    START = "start"
    FETCHING = "fetching"
    HAS_MORE = "has_more"
    DONE = "done"
    FAILED = "failed"


def validate_page_size(page_size: Any) -> int:
    """Return *page_size* if it is a positive integer.

    Raises:
        ValueError: For non-integers (including ``bool``) and values below 1.
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        msg = f"page_size must be a positive integer, got {page_size!r}"
        raise ValueError(msg)
    return page_size


class CursorPager:
    """Issues page requests for an index match against one store handle."""

    def __init__(self, store: DocumentStore, *, projection: Projection = Projection.REFS) -> None:
        self._store = store
        self._projection = projection

    @property
    def projection(self) -> Projection:
        return self._projection

    def first_page(self, index_name: str, match_key: Any, page_size: int) -> Page:
        """Fetch the first page of entries matching *match_key*."""
        return self._fetch(index_name, match_key, page_size, None)

    def next_page(self, index_name: str, match_key: Any, page_size: int, cursor: Cursor) -> Page:
        """Fetch the page that *cursor* points at."""
        return self._fetch(index_name, match_key, page_size, cursor)

    def paginate(
        self,
        index_name: str,
        match_key: Any,
        page_size: int,
        *,
        after: Cursor | None = None,
    ) -> Pagination:
        """Start a pagination, optionally resuming at *after*."""
        return Pagination(self, index_name, match_key, page_size, after=after)

    def _fetch(
        self, index_name: str, match_key: Any, page_size: int, cursor: Cursor | None
    ) -> Page:
        validate_page_size(page_size)
        expression = Paginate(
            match=match(index_name, match_key),
            size=page_size,
            after=cursor,
            projection=self._projection,
        )
        return self._store.query(expression)


class Pagination:
    """One single-use walk over an index match.

    Iterating yields :class:`Page` objects until DONE.  ``cursor`` is the
    position the next fetch would start from: the last cursor obtained
    from the store, or the initial ``after`` before any page was fetched.
    """

    def __init__(
        self,
        pager: CursorPager,
        index_name: str,
        match_key: Any,
        page_size: int,
        *,
        after: Cursor | None = None,
    ) -> None:
        self._pager = pager
        self.index_name = index_name
        self.match_key = match_key
        self.page_size = validate_page_size(page_size)
        self._cursor = after
        self._state = PagerState.START
        self._pages_fetched = 0

    @property
    def state(self) -> PagerState:
        return self._state

    @property
    def cursor(self) -> Cursor | None:
        return self._cursor

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    @property
    def finished(self) -> bool:
        return self._state in (PagerState.DONE, PagerState.FAILED)

    def fetch(self) -> Page:
        """Fetch the next page and advance the state machine.

        Raises:
            PaginationExhausted: The pagination is already DONE or FAILED.
            StoreUnavailable: The store call failed; ``exc.cursor`` is the
                last good cursor.
        """
        if self.finished:
            msg = f"Pagination of '{self.index_name}' is {self._state}; start a new one"
            raise PaginationExhausted(msg)

        self._state = PagerState.FETCHING
        try:
            if self._cursor is None:
                page = self._pager.first_page(self.index_name, self.match_key, self.page_size)
            else:
                page = self._pager.next_page(
                    self.index_name, self.match_key, self.page_size, self._cursor
                )
        except StoreUnavailable as exc:
            self._state = PagerState.FAILED
            logger.warning(
                "Page %d of %s failed: %s", self._pages_fetched + 1, self.index_name, exc
            )
            raise StoreUnavailable(str(exc), cursor=self._cursor) from exc
        except BaseException:
            self._state = PagerState.FAILED
            raise

        self._pages_fetched += 1
        if page.after is None:
            self._state = PagerState.DONE
            self._cursor = None
        else:
            self._state = PagerState.HAS_MORE
            self._cursor = page.after

        logger.debug(
            "Fetched page %d of %s: %d entries, has_more=%s",
            self._pages_fetched,
            self.index_name,
            len(page.data),
            page.after is not None,
        )
        return page

    def fail(self, cursor: Cursor | None) -> None:
        """Mark the pagination FAILED after a page it returned was rejected.

        *cursor* is where that page started, so a fresh pagination resumed
        from it reads the rejected page again instead of skipping it.
        """
        self._state = PagerState.FAILED
        self._cursor = cursor

    def __iter__(self) -> Iterator[Page]:
        while not self.finished:
            yield self.fetch()
