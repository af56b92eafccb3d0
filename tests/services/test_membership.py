"""Tests for MembershipService."""

from edgewalk.infrastructure.store import Count, DocumentStore, match
from edgewalk.services.membership import MembershipService


class TestAdd:
    def test_add_user(self, store: DocumentStore) -> None:
        result = MembershipService(store).add_user(1)
        assert result.ok
        assert result.data["id"] == 1
        assert result.data["ref"].startswith("users/")

    def test_duplicate_user(self, store: DocumentStore) -> None:
        svc = MembershipService(store)
        svc.add_user(1)
        result = svc.add_user(1)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "CONSTRAINT_VIOLATION"
        assert result.error.detail == {"index": "users_by_id", "key": [1]}


class TestLink:
    def test_link(self, store: DocumentStore) -> None:
        svc = MembershipService(store)
        svc.add_user(6)
        svc.add_group(3)
        result = svc.link(6, 3)
        assert result.ok
        assert result.data["user_id"] == 6
        assert result.data["group_id"] == 3
        assert result.data["ref"].startswith("edges/")

    def test_duplicate_link_rejected(self, store: DocumentStore) -> None:
        svc = MembershipService(store)
        svc.add_user(6)
        svc.add_group(3)
        svc.link(6, 3)
        result = svc.link(6, 3)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "CONSTRAINT_VIOLATION"
        assert result.error.detail["index"] == "edge_user_group"
        assert store.query(Count(match=match("edges_all"))) == 1

    def test_missing_ends(self, store: DocumentStore) -> None:
        svc = MembershipService(store)
        svc.add_group(3)
        result = svc.link(6, 4)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
        assert result.error.detail["missing"] == ["user 6", "group 4"]
        assert store.query(Count(match=match("edges_all"))) == 0
