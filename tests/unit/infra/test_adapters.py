"""Tests for the in-memory user repository."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from domain.models.user import User
from infrastructure.adapters import InMemoryUserRepository

NOW = datetime(2026, 2, 17, 12, 0, 0, tzinfo=timezone.utc)


class TestInMemoryUserRepository:

    def test_save_assigns_sequential_ids(self, user_repo: InMemoryUserRepository) -> None:
        first = user_repo.save(User(email="a@x.com"))
        second = user_repo.save(User(email="b@x.com"))
        assert (first.id, second.id) == (1, 2)

    def test_save_keeps_existing_id(self, user_repo: InMemoryUserRepository) -> None:
        assert user_repo.save(User(id=40, email="a@x.com")).id == 40

    def test_get_by_email(self, user_repo: InMemoryUserRepository) -> None:
        user_repo.save(User(name="Test", email="test@x.com"))
        assert user_repo.get_by_email("test@x.com").name == "Test"
        assert user_repo.get_by_email("nope@x.com") is None

    def test_email_exists_with_exclusion(self, user_repo: InMemoryUserRepository) -> None:
        user = user_repo.save(User(email="a@x.com"))
        assert user_repo.email_exists("a@x.com") is True
        assert user_repo.email_exists("a@x.com", exclude_id=user.id) is False

    def test_page_source_is_newest_first(self, user_repo, seed_users) -> None:
        seed_users(5)
        source = user_repo.page_source()
        assert source.count() == 5
        assert [u.email for u in source.fetch_slice(0, 2)] == [
            "user-5@test.example",
            "user-4@test.example",
        ]

    def test_page_source_breaks_ties_by_id(self, user_repo) -> None:
        user_repo.save(User(email="a@x.com", created_at=NOW))
        user_repo.save(User(email="b@x.com", created_at=NOW))
        assert [u.id for u in user_repo.page_source().fetch_slice(0, 10)] == [2, 1]

    def test_list_active(self, user_repo) -> None:
        user_repo.save(User(name="Bea", email="b@x.com"))
        user_repo.save(User(name="Al", email="a@x.com"))
        user_repo.save(User(name="Cy", email="c@x.com", is_active=False))
        assert [u.name for u in user_repo.list_active()] == ["Al", "Bea"]

    def test_list_by_level_range_inclusive(self, user_repo) -> None:
        for level in (5, 10, 20, 30):
            user_repo.save(User(email=f"l{level}@x.com", level=level))
        assert [u.level for u in user_repo.list_by_level_range(10, 20)] == [20, 10]

    def test_update_and_delete(self, user_repo) -> None:
        user = user_repo.save(User(email="a@x.com", created_at=NOW - timedelta(days=1)))
        user.name = "Renamed"
        user_repo.update(user)
        assert user_repo.get_by_id(user.id).name == "Renamed"
        assert user_repo.delete(user.id) is True
        assert user_repo.delete(user.id) is False
