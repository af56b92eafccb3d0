"""Traversal layer — cursor pager and traversal client.

Depends on the domain layer and on the store only through
:meth:`DocumentStore.query`.  Must never import from services or commands.
"""

from edgewalk.traversal.client import DecodedPage, Traversal, TraversalClient
from edgewalk.traversal.pager import CursorPager, PagerState, Pagination, validate_page_size

__all__ = [
    "CursorPager",
    "DecodedPage",
    "PagerState",
    "Pagination",
    "Traversal",
    "TraversalClient",
    "validate_page_size",
]
