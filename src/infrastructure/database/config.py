"""
Database configuration for the user directory.

Centralises the connection URL and pool tuning parameters consumed by
:mod:`infrastructure.database.engine`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.settings import AppSettings


@dataclass(frozen=True)
class DatabaseSettings:
    """Immutable database connection and pool configuration.

    ``URL`` is any SQLAlchemy URL.  Pool parameters only apply to
    server databases; SQLite URLs get a single shared connection.
    """

    URL: str = "sqlite://"

    # Connection-pool tuning
    POOL_SIZE: int = 20
    MAX_OVERFLOW: int = 10
    POOL_TIMEOUT: int = 30

    ECHO: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.URL.startswith("sqlite")

    @classmethod
    def from_app_settings(cls, settings: AppSettings) -> DatabaseSettings:
        return cls(
            URL=settings.database_url,
            POOL_SIZE=settings.db_pool_size,
            MAX_OVERFLOW=settings.db_max_overflow,
            POOL_TIMEOUT=settings.db_pool_timeout,
            ECHO=settings.db_echo,
        )
