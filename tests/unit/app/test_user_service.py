"""Unit tests for UserService: listing, lookups, and CRUD commands."""

from __future__ import annotations

from decimal import Decimal

import pytest

from application.schemas.user_dto import UserDto
from application.services.user_service import UserService
from domain.exceptions import InvalidArgumentError, UserAlreadyExistsError, UserNotFoundError
from domain.models.user import User


def _create(svc: UserService, hasher, **overrides) -> User:
    payload = {"name": "Bob Example", "email": "bob@example.com", "password": "Secret123"}
    payload.update(overrides)
    return svc.create_user(UserDto.from_create(payload, hasher))


class TestListUsers:

    def test_newest_first(self, user_service, seed_users):
        seed_users(42)
        result = user_service.list_users(per_page=15, page=1)
        assert [u.email for u in result.items[:2]] == [
            "user-42@test.example",
            "user-41@test.example",
        ]
        assert result.total == 42
        assert result.has_more_pages is True

    def test_last_page_holds_oldest(self, user_service, seed_users):
        seed_users(42)
        result = user_service.list_users(per_page=15, page=3)
        assert result.count == 12
        assert result.items[-1].email == "user-1@test.example"
        assert result.has_more_pages is False

    def test_defaults(self, user_service, seed_users):
        seed_users(20)
        result = user_service.list_users()
        assert result.per_page == 15
        assert result.current_page == 1
        assert result.count == 15

    def test_empty_store(self, user_service):
        result = user_service.list_users(per_page=10)
        assert result.is_empty
        assert result.total_pages == 0

    @pytest.mark.parametrize("per_page", [0, -3, 101])
    def test_per_page_out_of_range(self, user_service, per_page):
        with pytest.raises(InvalidArgumentError) as exc_info:
            user_service.list_users(per_page=per_page)
        assert exc_info.value.argument == "per_page"
        assert "between 1 and 100" in exc_info.value.detail

    def test_custom_max_per_page(self, user_repo):
        svc = UserService(user_repo=user_repo, max_per_page=20)
        with pytest.raises(InvalidArgumentError):
            svc.list_users(per_page=21)

    def test_invalid_page(self, user_service):
        with pytest.raises(InvalidArgumentError):
            user_service.list_users(per_page=15, page=0)


class TestLookups:

    def test_get_user(self, user_service, fake_hasher):
        created = _create(user_service, fake_hasher)
        assert user_service.get_user(created.id) is created

    def test_get_missing_user_raises(self, user_service):
        with pytest.raises(UserNotFoundError) as exc_info:
            user_service.get_user(999)
        assert exc_info.value.status_code == 404

    def test_get_user_by_id_returns_none(self, user_service):
        assert user_service.get_user_by_id(5) is None

    @pytest.mark.parametrize("user_id", [0, -1])
    def test_non_positive_id_rejected(self, user_service, user_id):
        with pytest.raises(InvalidArgumentError):
            user_service.get_user_by_id(user_id)

    def test_active_users_sorted_by_name(self, user_service, fake_hasher):
        _create(user_service, fake_hasher, name="Zed", email="z@example.com")
        _create(user_service, fake_hasher, name="Amy", email="a@example.com")
        _create(user_service, fake_hasher, name="Max", email="m@example.com", is_active=False)
        assert [u.name for u in user_service.get_active_users()] == ["Amy", "Zed"]

    def test_email_exists(self, user_service, fake_hasher):
        created = _create(user_service, fake_hasher)
        assert user_service.email_exists("bob@example.com") is True
        assert user_service.email_exists("bob@example.com", exclude_id=created.id) is False
        assert user_service.email_exists("nobody@example.com") is False

    def test_email_exists_rejects_malformed(self, user_service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            user_service.email_exists("not-an-email")
        assert exc_info.value.argument == "email"

    def test_level_range(self, user_service, fake_hasher):
        _create(user_service, fake_hasher, email="l10@example.com", level=10)
        _create(user_service, fake_hasher, email="l50@example.com", level=50)
        _create(user_service, fake_hasher, email="l90@example.com", level=90)
        users = user_service.get_users_by_level_range(10, 50)
        assert [u.level for u in users] == [50, 10]

    def test_level_range_inverted(self, user_service):
        with pytest.raises(InvalidArgumentError):
            user_service.get_users_by_level_range(50, 10)


class TestCreateUser:

    def test_create_assigns_id_and_hash(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher)
        assert user.id == 1
        assert user.hashed_password == "hashed:Secret123"
        assert user.is_active is True
        assert user.level == 1

    def test_duplicate_email_raises(self, user_service, fake_hasher):
        _create(user_service, fake_hasher)
        with pytest.raises(UserAlreadyExistsError) as exc_info:
            _create(user_service, fake_hasher, name="Other")
        assert exc_info.value.status_code == 409

    def test_missing_required_fields(self, user_service):
        with pytest.raises(InvalidArgumentError):
            user_service.create_user(UserDto(name="No Email"))


class TestUpdateUser:

    def test_updates_only_sent_fields(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher, level=20)
        before = user.updated_at
        updated = user_service.update_user(user, UserDto.from_update({"name": "Robert"}, fake_hasher))
        assert updated.name == "Robert"
        assert updated.level == 20
        assert updated.hashed_password == "hashed:Secret123"
        assert updated.updated_at >= before

    def test_password_replaced_when_sent(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher)
        updated = user_service.update_user(user, UserDto.from_update({"password": "Newpass99"}, fake_hasher))
        assert updated.hashed_password == "hashed:Newpass99"
        assert user_service.get_user(user.id).hashed_password == "hashed:Newpass99"

    def test_keeping_own_email_is_allowed(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher)
        dto = UserDto.from_update({"email": "bob@example.com"}, fake_hasher)
        assert user_service.update_user(user, dto).email == "bob@example.com"

    def test_taking_another_email_conflicts(self, user_service, fake_hasher):
        _create(user_service, fake_hasher, email="taken@example.com")
        user = _create(user_service, fake_hasher)
        with pytest.raises(UserAlreadyExistsError):
            user_service.update_user(user, UserDto.from_update({"email": "taken@example.com"}, fake_hasher))


class TestOtherCommands:

    def test_delete(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher)
        assert user_service.delete_user(user) is True
        assert user_service.get_user_by_id(user.id) is None
        assert user_service.delete_user(user) is False

    def test_toggle_status(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher)
        assert user_service.toggle_user_status(user).is_active is False
        assert user_service.toggle_user_status(user).is_active is True

    def test_update_rating(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher, level=20)
        assert user_service.update_user_rating(user, Decimal("8.25")).rating == Decimal("8.25")

    def test_update_rating_accepts_float(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher, level=20)
        assert user_service.update_user_rating(user, 9.5).rating == Decimal("9.5")

    @pytest.mark.parametrize("rating", [Decimal("-0.01"), Decimal("10.01")])
    def test_update_rating_out_of_range(self, user_service, fake_hasher, rating):
        user = _create(user_service, fake_hasher)
        with pytest.raises(InvalidArgumentError) as exc_info:
            user_service.update_user_rating(user, rating)
        assert exc_info.value.argument == "rating"


class TestLowLevelRatingCap:

    def test_create_rejects_high_rating_below_level_ten(self, user_service, fake_hasher):
        with pytest.raises(InvalidArgumentError) as exc_info:
            _create(user_service, fake_hasher, level=3, rating=6)
        assert exc_info.value.argument == "rating"
        assert user_service.list_users().total == 0

    def test_update_with_rating_only_uses_stored_level(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher, level=3)
        with pytest.raises(InvalidArgumentError) as exc_info:
            user_service.update_user(user, UserDto.from_update({"rating": 9}, fake_hasher))
        assert exc_info.value.argument == "rating"
        stored = user_service.get_user(user.id)
        assert stored.rating is None
        assert stored.level == 3

    def test_update_with_level_only_uses_stored_rating(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher, level=20, rating=8)
        with pytest.raises(InvalidArgumentError):
            user_service.update_user(user, UserDto.from_update({"level": 4}, fake_hasher))
        assert user_service.get_user(user.id).level == 20

    def test_raising_level_and_rating_together(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher, level=3)
        updated = user_service.update_user(user, UserDto.from_update({"level": 10, "rating": 9}, fake_hasher))
        assert (updated.level, updated.rating) == (10, Decimal("9"))

    def test_rating_of_five_is_allowed(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher, level=3)
        assert user_service.update_user_rating(user, Decimal("5")).rating == Decimal("5")

    def test_rating_endpoint_respects_cap(self, user_service, fake_hasher):
        user = _create(user_service, fake_hasher, level=3)
        with pytest.raises(InvalidArgumentError):
            user_service.update_user_rating(user, Decimal("5.5"))
        assert user_service.get_user(user.id).rating is None
