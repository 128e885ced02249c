"""
Repository implementations backed by SQLAlchemy.

Each repository encapsulates data-access logic for one aggregate and
operates through an injected :class:`Session`.  Transaction boundaries
(commit / rollback) belong to the caller, typically ``session_scope``
in :mod:`infrastructure.database.engine`.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Generic, Optional, TypeVar

from sqlalchemy import Select, delete, func, select
from sqlalchemy.orm import Session

from domain.exceptions import UserNotFoundError
from domain.models.user import User

from .models import UserModel

T = TypeVar("T")


# =========================================================================
# SqlAlchemyPageSource -- count + OFFSET/LIMIT over any SELECT
# =========================================================================

class SqlAlchemyPageSource(Generic[T]):
    """Page source over an ordered ``SELECT`` statement.

    ``count()`` wraps the statement, stripped of its ``ORDER BY``, in a
    ``SELECT count(*)`` subquery; ``fetch_slice()`` applies
    ``OFFSET``/``LIMIT`` to the ordered statement.  The two run as
    separate queries, so they see a consistent snapshot only if the
    session's transaction isolation provides one.

    Parameters
    ----------
    session:
        The session both queries run on.
    stmt:
        An ordered ``SELECT`` returning ORM rows.
    mapper:
        Converts each fetched row into the item type.
    """

    def __init__(
        self,
        session: Session,
        stmt: Select[Any],
        mapper: Callable[[Any], T],
    ) -> None:
        self._session = session
        self._stmt = stmt
        self._mapper = mapper

    def count(self) -> int:
        count_stmt = select(func.count()).select_from(self._stmt.order_by(None).subquery())
        return int(self._session.execute(count_stmt).scalar_one())

    def fetch_slice(self, offset: int, limit: int) -> Sequence[T]:
        rows = self._session.execute(self._stmt.offset(offset).limit(limit)).scalars().all()
        return [self._mapper(row) for row in rows]


# =========================================================================
# SqlAlchemyUserRepository
# =========================================================================

class SqlAlchemyUserRepository:
    """CRUD operations for :class:`UserModel` (``users``).

    Parameters
    ----------
    session:
        A synchronous :class:`Session`.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _get_model(self, user_id: int) -> Optional[UserModel]:
        return self._session.get(UserModel, user_id)

    def get_by_id(self, user_id: int) -> Optional[User]:
        model = self._get_model(user_id)
        return model.to_domain() if model is not None else None

    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserModel).where(UserModel.email == email)
        model = self._session.execute(stmt).scalar_one_or_none()
        return model.to_domain() if model is not None else None

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(UserModel.id).where(UserModel.email == email)
        if exclude_id is not None:
            stmt = stmt.where(UserModel.id != exclude_id)
        return self._session.execute(stmt.limit(1)).first() is not None

    def page_source(self) -> SqlAlchemyPageSource[User]:
        """Users ordered newest first, ``id`` breaking ties."""
        stmt = select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id.desc())
        return SqlAlchemyPageSource(self._session, stmt, UserModel.to_domain)

    def list_active(self) -> list[User]:
        stmt = (
            select(UserModel)
            .where(UserModel.is_active.is_(True))
            .order_by(UserModel.name.asc())
        )
        return [m.to_domain() for m in self._session.execute(stmt).scalars().all()]

    def list_by_level_range(self, min_level: int, max_level: int) -> list[User]:
        stmt = (
            select(UserModel)
            .where(UserModel.level.between(min_level, max_level))
            .order_by(UserModel.level.desc())
        )
        return [m.to_domain() for m in self._session.execute(stmt).scalars().all()]

    def save(self, user: User) -> User:
        model = UserModel.from_domain(user)
        self._session.add(model)
        self._session.flush()
        self._session.refresh(model)
        return model.to_domain()

    def update(self, user: User) -> User:
        model = self._get_model(user.id)
        if model is None:
            raise UserNotFoundError(user_id=str(user.id))
        model.apply(user)
        self._session.flush()
        self._session.refresh(model)
        return model.to_domain()

    def delete(self, user_id: int) -> bool:
        stmt = delete(UserModel).where(UserModel.id == user_id)
        result = self._session.execute(stmt)
        self._session.flush()
        return result.rowcount > 0
