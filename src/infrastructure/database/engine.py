"""
SQLAlchemy engine setup with connection pooling and scoped sessions.

Provides the engine factory, a session factory, and a transactional
``session_scope`` used by the container to give every request its own
session.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config import DatabaseSettings
from .models import Base

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine

# ---------------------------------------------------------------------------
# Engine / session factories
# ---------------------------------------------------------------------------


def build_engine(settings: DatabaseSettings | None = None) -> Engine:
    """Create a synchronous SQLAlchemy :class:`Engine`.

    Server databases get a :class:`QueuePool`.  SQLite gets a
    :class:`StaticPool` so an in-memory database survives across the
    threads FastAPI runs sync dependencies on.

    Parameters
    ----------
    settings:
        Database configuration.  Falls back to defaults when *None*.
    """
    s = settings or DatabaseSettings()
    if s.is_sqlite:
        return sa_create_engine(
            s.URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=s.ECHO,
        )
    return sa_create_engine(
        s.URL,
        poolclass=QueuePool,
        pool_size=s.POOL_SIZE,
        max_overflow=s.MAX_OVERFLOW,
        pool_timeout=s.POOL_TIMEOUT,
        pool_pre_ping=True,
        echo=s.ECHO,
    )


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create every table known to the declarative base (idempotent)."""
    Base.metadata.create_all(engine)


# ---------------------------------------------------------------------------
# Session scope
# ---------------------------------------------------------------------------


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """Yield a :class:`Session`, committing on success and rolling back on error.

    Typical usage::

        with session_scope(factory) as session:
            repo = SqlAlchemyUserRepository(session)
            ...
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
