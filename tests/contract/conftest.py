"""Contract test fixtures: a FastAPI TestClient over in-memory storage."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

VALID_USER = {
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "password": "Secret123",
    "password_confirmation": "Secret123",
    "level": 12,
    "rating": 4.5,
}


@pytest.fixture
def settings():
    from infrastructure.settings import AppSettings

    # Use lower cost for fast tests
    return AppSettings(
        database_url="",
        argon2_time_cost=1,
        argon2_memory_cost=8192,
        argon2_parallelism=1,
    )


@pytest.fixture
def client(settings):
    from starlette.testclient import TestClient

    from infrastructure.container import ServiceContainer, reset_container, set_container
    from presentation.main import create_app

    reset_container()
    set_container(ServiceContainer(settings))
    with TestClient(create_app()) as test_client:
        yield test_client
    reset_container()


@pytest.fixture
def create_user(client):
    """POST a user built from VALID_USER plus *overrides*; return the resource."""

    def _create(**overrides):
        payload = {**VALID_USER, **overrides}
        resp = client.post("/api/v1/users", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _create


@pytest.fixture
def valid_user() -> dict:
    return dict(VALID_USER)
