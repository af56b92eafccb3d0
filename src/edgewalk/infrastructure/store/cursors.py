"""Store-private encoding of pagination cursors and index terms.

A cursor token is url-safe base64 of a small JSON object naming the index,
the matched term, and the document ref the next page starts at.  Only the
store reads these; callers receive them wrapped in :class:`Cursor` and
hand them back unchanged.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from edgewalk.domain.paging import Cursor


def encode_term(values: tuple[Any, ...]) -> str:
    """Canonical JSON form of a term tuple, used as the index entry key.

    Examples:
        >>> encode_term((6,))
        '[6]'
        >>> encode_term((6, 3))
        '[6,3]'
        >>> encode_term(())
        '[]'
    """
    return json.dumps(list(values), separators=(",", ":"), sort_keys=True)


def encode_cursor(index: str, term: str, ref: int) -> Cursor:
    """Build the cursor for the page that starts at document *ref*."""
    payload = json.dumps({"i": index, "t": term, "r": ref}, separators=(",", ":"))
    token = base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")
    return Cursor(token=token)


def decode_cursor(cursor: Cursor, *, index: str, term: str) -> int:
    """Return the starting ref encoded in *cursor*.

    Raises:
        ValueError: If the token is malformed or was issued for a different
            index or term.
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.token.encode("ascii"))
        payload = json.loads(raw)
        ref = int(payload["r"])
        issued_for = (payload["i"], payload["t"])
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as exc:
        msg = f"Malformed cursor token {cursor.token!r}"
        raise ValueError(msg) from exc

    if issued_for != (index, term):
        msg = f"Cursor was issued for index '{issued_for[0]}' term {issued_for[1]}"
        raise ValueError(msg)
    return ref
