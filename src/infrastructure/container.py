"""Dependency injection container for the User Directory API.

Wires together infrastructure adapters and application services,
exposing factory functions suitable for FastAPI's ``Depends()`` system.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from application.services.user_service import UserService
from infrastructure.adapters import InMemoryUserRepository
from infrastructure.auth.password_handler import PasswordHandler
from infrastructure.database.config import DatabaseSettings
from infrastructure.database.engine import (
    build_engine,
    build_session_factory,
    create_schema,
    session_scope,
)
from infrastructure.database.repository import SqlAlchemyUserRepository
from infrastructure.settings import AppSettings, get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Central DI container that owns all long-lived instances.

    With ``database_url`` unset, users live in a process-wide in-memory
    repository.  Otherwise every service scope gets its own SQLAlchemy
    session, committed when the scope exits cleanly.
    """

    def __init__(self, settings: AppSettings | None = None) -> None:
        self.settings = settings or get_settings()
        self.password_handler = PasswordHandler.from_settings(self.settings)

        self.engine = None
        self._session_factory = None
        self._memory_repo: InMemoryUserRepository | None = None

        if self.settings.database_url:
            self.engine = build_engine(DatabaseSettings.from_app_settings(self.settings))
            create_schema(self.engine)
            self._session_factory = build_session_factory(self.engine)
            backend = "sqlalchemy"
        else:
            self._memory_repo = InMemoryUserRepository()
            backend = "memory"

        logger.info("ServiceContainer initialized (storage=%s)", backend)

    @contextmanager
    def user_service_scope(self) -> Iterator[UserService]:
        """Yield a :class:`UserService` bound to one unit of work."""
        if self._session_factory is None:
            yield UserService(self._memory_repo, max_per_page=self.settings.max_per_page)
            return
        with session_scope(self._session_factory) as session:
            yield UserService(
                SqlAlchemyUserRepository(session),
                max_per_page=self.settings.max_per_page,
            )

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


# Module-level singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Return the global container singleton."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def set_container(container: ServiceContainer) -> None:
    """Install a pre-built container (for testing)."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset the global container (for testing)."""
    global _container
    if _container is not None:
        _container.dispose()
    _container = None


# ---------------------------------------------------------------------------
# FastAPI dependency factories
# ---------------------------------------------------------------------------


def get_user_service() -> Iterator[UserService]:
    with get_container().user_service_scope() as service:
        yield service


def get_password_handler() -> PasswordHandler:
    return get_container().password_handler


def get_app_settings() -> AppSettings:
    return get_container().settings
