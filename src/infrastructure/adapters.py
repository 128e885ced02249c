"""Adapter implementations bridging infrastructure to application-layer ports.

Provides the in-memory user repository used by the default container
wiring and by unit tests.
"""

from __future__ import annotations

import itertools
import logging
from typing import Optional

from application.services.paginator import SequencePageSource
from domain.models.user import User

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# In-memory repository adapters (swap for the SQLAlchemy repo in production)
# ---------------------------------------------------------------------------

class InMemoryUserRepository:
    """Synchronous in-memory user store.

    Ids are assigned from a monotonically increasing counter on
    :meth:`save`, mirroring an auto-increment primary key.
    """

    def __init__(self) -> None:
        self._store: dict[int, User] = {}
        self._ids = itertools.count(1)

    def _newest_first(self) -> list[User]:
        return sorted(
            self._store.values(),
            key=lambda u: (u.created_at, u.id),
            reverse=True,
        )

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._store.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        for user in self._store.values():
            if user.email == email:
                return user
        return None

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        return any(
            u.email == email and u.id != exclude_id for u in self._store.values()
        )

    def page_source(self) -> SequencePageSource[User]:
        return SequencePageSource(self._newest_first())

    def list_active(self) -> list[User]:
        return sorted((u for u in self._store.values() if u.is_active), key=lambda u: u.name)

    def list_by_level_range(self, min_level: int, max_level: int) -> list[User]:
        return sorted(
            (u for u in self._store.values() if min_level <= u.level <= max_level),
            key=lambda u: u.level,
            reverse=True,
        )

    def save(self, user: User) -> User:
        if not user.id:
            user.id = next(self._ids)
        self._store[user.id] = user
        return user

    def update(self, user: User) -> User:
        self._store[user.id] = user
        return user

    def delete(self, user_id: int) -> bool:
        return self._store.pop(user_id, None) is not None
