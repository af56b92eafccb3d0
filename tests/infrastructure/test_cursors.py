"""Tests for store-private cursor and term encoding."""

import pytest

from edgewalk.domain.paging import Cursor
from edgewalk.infrastructure.store.cursors import decode_cursor, encode_cursor, encode_term


class TestEncodeTerm:
    def test_canonical_form(self) -> None:
        assert encode_term((6,)) == "[6]"
        assert encode_term((6, 3)) == "[6,3]"
        assert encode_term(()) == "[]"

    def test_int_and_string_differ(self) -> None:
        assert encode_term((6,)) != encode_term(("6",))


class TestCursor:
    def test_decode_returns_start_ref(self) -> None:
        cursor = encode_cursor("edges_user_groups", "[6]", 42)
        assert decode_cursor(cursor, index="edges_user_groups", term="[6]") == 42

    def test_token_is_opaque_text(self) -> None:
        cursor = encode_cursor("edges_all", "[]", 1)
        assert "edges_all" not in cursor.token

    def test_other_index_rejected(self) -> None:
        cursor = encode_cursor("edges_user_groups", "[6]", 42)
        with pytest.raises(ValueError, match="issued for"):
            decode_cursor(cursor, index="edges_group_users", term="[6]")

    def test_other_term_rejected(self) -> None:
        cursor = encode_cursor("edges_user_groups", "[6]", 42)
        with pytest.raises(ValueError, match="issued for"):
            decode_cursor(cursor, index="edges_user_groups", term="[7]")

    @pytest.mark.parametrize("token", ["not-base64!!", "e30=", "bm90IGpzb24="])
    def test_malformed_rejected(self, token: str) -> None:
        with pytest.raises(ValueError, match="Malformed"):
            decode_cursor(Cursor(token=token), index="edges_all", term="[]")
