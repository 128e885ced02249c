"""Integration test fixtures backed by an in-memory SQLite database."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))


@pytest.fixture
def sync_engine():
    """Create a fresh SQLite engine with the schema applied."""
    from infrastructure.database.config import DatabaseSettings
    from infrastructure.database.engine import build_engine, create_schema

    engine = build_engine(DatabaseSettings())
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sync_engine):
    from infrastructure.database.engine import build_session_factory

    return build_session_factory(sync_engine)


@pytest.fixture
def db_session(session_factory):
    """Provide a database session with rollback."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()
