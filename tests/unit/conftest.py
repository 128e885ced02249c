"""Shared fixtures for unit tests."""

from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from application.services.user_service import UserService
from domain.models.user import User
from infrastructure.adapters import InMemoryUserRepository
from infrastructure.auth.password_handler import PasswordHandler

NOW = datetime(2026, 2, 17, 12, 0, 0, tzinfo=timezone.utc)


class FakeHasher:
    """Deterministic stand-in for the Argon2 handler."""

    def hash_password(self, plain_password: str) -> str:
        return f"hashed:{plain_password}"


@pytest.fixture
def fake_hasher() -> FakeHasher:
    return FakeHasher()


@pytest.fixture
def password_handler() -> PasswordHandler:
    # Use lower cost for fast tests
    return PasswordHandler(time_cost=1, memory_cost=16384, parallelism=1)


@pytest.fixture
def sample_user() -> User:
    return User(
        name="Alice Test",
        email="alice@test.example",
        hashed_password="$argon2id$v=19$m=65536,t=3,p=4$hash",
        dob=date(1990, 5, 17),
        is_active=True,
        level=12,
        rating=Decimal("4.50"),
        metadata={"team": "core"},
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def user_service(user_repo: InMemoryUserRepository) -> UserService:
    return UserService(user_repo=user_repo)


@pytest.fixture
def seed_users(user_repo: InMemoryUserRepository):
    """Save *n* users, one minute apart, so ``user-1`` is the oldest."""

    def _seed(n: int) -> list[User]:
        users = []
        for i in range(1, n + 1):
            users.append(
                user_repo.save(
                    User(
                        name=f"User {chr(ord('A') + (i - 1) % 26)}",
                        email=f"user-{i}@test.example",
                        hashed_password="x",
                        level=(i % 100) + 1,
                        created_at=NOW + timedelta(minutes=i),
                    )
                )
            )
        return users

    return _seed
