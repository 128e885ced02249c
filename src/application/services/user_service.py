"""Application service that orchestrates user CRUD operations.

``UserService`` sits between the presentation layer and the
repositories.  It enforces the service-level argument policies (page
size range, positive ids, rating bounds, the low-level rating cap and
email uniqueness) and hands list queries to the pagination boundary
adapter.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Protocol

from email_validator import EmailNotValidError, validate_email

from application.schemas.pagination import DEFAULT_PER_PAGE, MAX_PER_PAGE, PaginatedResult
from application.schemas.user_dto import UserDto
from application.services.paginator import PageSource, paginate
from domain.exceptions import InvalidArgumentError, UserAlreadyExistsError, UserNotFoundError
from domain.models.user import (
    LOW_LEVEL_MAX_RATING,
    LOW_LEVEL_THRESHOLD,
    MAX_RATING,
    MIN_RATING,
    User,
)

logger = logging.getLogger(__name__)

# DTO keys that map onto differently named entity attributes.
_DTO_TO_ENTITY = {"password": "hashed_password"}


# ---------------------------------------------------------------------------
# Repository port (dependency-inversion)
# ---------------------------------------------------------------------------

class UserRepository(Protocol):
    """Port: persistence operations for :class:`User` entities."""

    def get_by_id(self, user_id: int) -> Optional[User]: ...

    def get_by_email(self, email: str) -> Optional[User]: ...

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool: ...

    def page_source(self) -> PageSource[User]: ...

    def list_active(self) -> list[User]: ...

    def list_by_level_range(self, min_level: int, max_level: int) -> list[User]: ...

    def save(self, user: User) -> User: ...

    def update(self, user: User) -> User: ...

    def delete(self, user_id: int) -> bool: ...


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class UserService:
    """Orchestrates all user CRUD operations."""

    def __init__(self, user_repo: UserRepository, max_per_page: int = MAX_PER_PAGE) -> None:
        self._user_repo = user_repo
        self._max_per_page = max_per_page

    # -- validation helpers -----------------------------------------------

    def _validate_per_page(self, per_page: int) -> None:
        if per_page < 1 or per_page > self._max_per_page:
            raise InvalidArgumentError(
                f"Per page must be between 1 and {self._max_per_page}",
                argument="per_page",
            )

    @staticmethod
    def _validate_user_id(user_id: int) -> None:
        if user_id <= 0:
            raise InvalidArgumentError("User ID must be a positive integer", argument="id")

    @staticmethod
    def _validate_email(email: str) -> None:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as exc:
            raise InvalidArgumentError("Invalid email format", argument="email") from exc

    @staticmethod
    def _validate_level_range(min_level: int, max_level: int) -> None:
        if min_level > max_level:
            raise InvalidArgumentError(
                "Minimum level cannot be greater than maximum level",
                argument="min_level",
            )

    @staticmethod
    def _validate_rating(rating: Decimal) -> None:
        if rating < MIN_RATING or rating > MAX_RATING:
            raise InvalidArgumentError(
                f"Rating must be between {MIN_RATING} and {MAX_RATING}",
                argument="rating",
            )

    @staticmethod
    def _validate_rating_for_level(user: User) -> None:
        if (
            user.rating is not None
            and user.level < LOW_LEVEL_THRESHOLD
            and user.rating > LOW_LEVEL_MAX_RATING
        ):
            raise InvalidArgumentError(
                f"Users below level {LOW_LEVEL_THRESHOLD} cannot have rating above "
                f"{LOW_LEVEL_MAX_RATING}",
                argument="rating",
            )

    @staticmethod
    def _apply(user: User, dto: UserDto) -> None:
        for key, value in dto.to_dict().items():
            setattr(user, _DTO_TO_ENTITY.get(key, key), value)

    # -- queries ----------------------------------------------------------

    def list_users(
        self,
        per_page: int = DEFAULT_PER_PAGE,
        page: Optional[int] = None,
    ) -> PaginatedResult[User]:
        """Return one page of users, newest first.

        ``per_page`` must lie in ``[1, max_per_page]``; ``page`` defaults
        to the first page.
        """
        self._validate_per_page(per_page)
        return paginate(self._user_repo.page_source(), per_page, page)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        self._validate_user_id(user_id)
        return self._user_repo.get_by_id(user_id)

    def get_user(self, user_id: int) -> User:
        """Retrieve a single user by ID, raising when it does not exist."""
        user = self.get_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id=str(user_id))
        return user

    def get_active_users(self) -> list[User]:
        """All active users ordered by name."""
        return self._user_repo.list_active()

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether *email* is registered, optionally ignoring one user."""
        self._validate_email(email)
        return self._user_repo.email_exists(email, exclude_id=exclude_id)

    def get_users_by_level_range(self, min_level: int, max_level: int) -> list[User]:
        """Users whose level lies in ``[min_level, max_level]``, highest first."""
        self._validate_level_range(min_level, max_level)
        return self._user_repo.list_by_level_range(min_level, max_level)

    # -- commands ---------------------------------------------------------

    def create_user(self, dto: UserDto) -> User:
        if dto.email is None or dto.name is None or not dto.has_password():
            raise InvalidArgumentError(
                "name, email and password are required to create a user",
                argument="dto",
            )
        if self._user_repo.email_exists(dto.email):
            raise UserAlreadyExistsError(email=dto.email)

        user = User()
        self._apply(user, dto)
        self._validate_rating_for_level(user)
        user = self._user_repo.save(user)
        logger.info("User %s created", user.id)
        logger.debug("User %s fields: %s", user.id, dto.to_dict_without_password())
        return user

    def update_user(self, user: User, dto: UserDto) -> User:
        """Apply the provided fields; the stored password survives when none is sent.

        The level/rating rule is checked against the merged record, so a
        body that only carries ``rating`` is still judged by the stored
        ``level``.  *user* itself is left untouched when validation fails.
        """
        if dto.email is not None and self._user_repo.email_exists(dto.email, exclude_id=user.id):
            raise UserAlreadyExistsError(email=dto.email)

        merged = replace(user)
        self._apply(merged, dto)
        self._validate_rating_for_level(merged)
        merged.touch()
        merged = self._user_repo.update(merged)
        logger.info("User %s updated (%s)", merged.id, ", ".join(sorted(dto.to_dict_without_password())))
        return merged

    def delete_user(self, user: User) -> bool:
        deleted = self._user_repo.delete(user.id)
        if deleted:
            logger.info("User %s deleted", user.id)
        return deleted

    def toggle_user_status(self, user: User) -> User:
        user.is_active = not user.is_active
        user.touch()
        return self._user_repo.update(user)

    def update_user_rating(self, user: User, rating: Decimal) -> User:
        rating = Decimal(str(rating))
        self._validate_rating(rating)
        self._validate_rating_for_level(replace(user, rating=rating))
        user.rating = rating
        user.touch()
        return self._user_repo.update(user)
