"""Data-transfer object carrying validated user fields into the service layer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Protocol

from domain.models.user import MIN_LEVEL


class PasswordHasher(Protocol):
    """Port: one-way password hashing."""

    def hash_password(self, plain_password: str) -> str: ...


@dataclass(frozen=True)
class UserDto:
    """Immutable user payload.

    ``password`` is already hashed.  A ``None`` field means "not
    provided" and is dropped by :meth:`to_dict`, so partial updates never
    overwrite stored values with nulls.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    dob: Optional[date] = None
    is_active: Optional[bool] = None
    level: Optional[int] = None
    rating: Optional[Decimal] = None
    metadata: Optional[dict[str, str]] = None

    @classmethod
    def from_create(cls, payload: Mapping[str, Any], hasher: PasswordHasher) -> UserDto:
        """Build a DTO for a new user, hashing the password and applying defaults."""
        is_active = payload.get("is_active")
        level = payload.get("level")
        return cls(
            name=payload["name"],
            email=payload["email"],
            password=hasher.hash_password(payload["password"]),
            dob=payload.get("dob"),
            is_active=True if is_active is None else is_active,
            level=MIN_LEVEL if level is None else level,
            rating=_as_decimal(payload.get("rating")),
            metadata=payload.get("metadata"),
        )

    @classmethod
    def from_update(cls, payload: Mapping[str, Any], hasher: PasswordHasher) -> UserDto:
        """Build a DTO from a partial update; the password is hashed only if sent."""
        password = payload.get("password")
        return cls(
            name=payload.get("name"),
            email=payload.get("email"),
            password=hasher.hash_password(password) if password else None,
            dob=payload.get("dob"),
            is_active=payload.get("is_active"),
            level=payload.get("level"),
            rating=_as_decimal(payload.get("rating")),
            metadata=payload.get("metadata"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}

    def has_password(self) -> bool:
        return self.password is not None

    def to_dict_without_password(self) -> dict[str, Any]:
        data = self.to_dict()
        data.pop("password", None)
        return data


def _as_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, Decimal):
        return value
    return Decimal(str(value))
