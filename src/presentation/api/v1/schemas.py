"""
Pydantic v2 request/response schemas for the User Directory API.

Request models carry every validation rule for user payloads; response
models document the resource and collection layouts in OpenAPI.  Errors
follow RFC 9457 Problem Details.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    SecretStr,
    ValidationInfo,
    field_validator,
    model_validator,
)

from domain.models.user import (
    LOW_LEVEL_MAX_RATING,
    LOW_LEVEL_THRESHOLD,
    MAX_LEVEL,
    MIN_LEVEL,
    User,
)

NAME_PATTERN = r"^[a-zA-Z\s]+$"
EARLIEST_DOB = date(1900, 1, 1)
MAX_METADATA_KEYS = 10
MAX_METADATA_VALUE_LENGTH = 1000

# ---------------------------------------------------------------------------
# Base / shared
# ---------------------------------------------------------------------------


class _ApiModel(BaseModel):
    """Base model: snake_case fields, populated from attributes or by name."""

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        json_schema_extra={"$schema": "https://json-schema.org/draft/2020-12/schema"},
    )


class PaginationMeta(BaseModel):
    """Metadata block of the ``full`` collection shape."""

    total: int = Field(..., description="Total number of matching users.")
    count: int = Field(..., description="Number of users on this page.")
    per_page: int = Field(..., description="Requested page size.")
    current_page: int = Field(..., description="Current page number (1-indexed).")
    total_pages: int = Field(..., description="Total number of pages.")
    has_more_pages: bool = Field(..., description="Whether a later page has users.")


class MinimalPagination(BaseModel):
    """Metadata block of the ``minimal`` collection shape."""

    total: int = Field(..., description="Total number of matching users.")


# ---------------------------------------------------------------------------
# RFC 9457 Problem Details error response
# ---------------------------------------------------------------------------


class ErrorResponse(_ApiModel):
    """Error response following RFC 9457 Problem Details for HTTP APIs.

    See https://www.rfc-editor.org/rfc/rfc9457
    """

    type: str = Field(
        default="about:blank",
        description="A URI reference that identifies the problem type.",
        examples=["https://api.users.example/problems/user-not-found"],
    )
    title: str = Field(..., examples=["User Not Found"])
    status: int = Field(..., examples=[404])
    detail: str = Field(..., examples=["User not found: 42"])
    instance: str | None = Field(default=None, examples=["/api/v1/users/42"])
    errors: list[dict[str, Any]] | None = Field(
        default=None,
        description="Validation error details (when status is 422).",
    )


# ---------------------------------------------------------------------------
# User request schemas
# ---------------------------------------------------------------------------


def _check_password_strength(raw: str) -> None:
    checks = [
        any(c.islower() for c in raw),
        any(c.isupper() for c in raw),
        any(c.isdigit() for c in raw),
    ]
    if not all(checks):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase "
            "letter, and one digit."
        )


def _check_dob(value: date | None) -> date | None:
    if value is None:
        return value
    if value >= date.today():
        raise ValueError("Date of birth must be before today.")
    if value <= EARLIEST_DOB:
        raise ValueError("Date of birth must be after January 1, 1900.")
    return value


def _check_metadata(value: dict[str, str] | None) -> dict[str, str] | None:
    if value is None:
        return value
    if len(value) > MAX_METADATA_KEYS:
        raise ValueError(f"Metadata cannot have more than {MAX_METADATA_KEYS} fields.")
    if any(len(v) > MAX_METADATA_VALUE_LENGTH for v in value.values()):
        raise ValueError(
            f"Each metadata value cannot exceed {MAX_METADATA_VALUE_LENGTH} characters."
        )
    return value


def _check_rating_for_level(rating: Decimal | None, level: int | None) -> Decimal | None:
    if (
        rating is not None
        and level is not None
        and level < LOW_LEVEL_THRESHOLD
        and rating > LOW_LEVEL_MAX_RATING
    ):
        raise ValueError(
            f"Users below level {LOW_LEVEL_THRESHOLD} cannot have rating above "
            f"{LOW_LEVEL_MAX_RATING}."
        )
    return rating


def _check_password_confirmation(password: SecretStr | None, confirmation: SecretStr | None) -> None:
    if password is None:
        return
    if confirmation is None or confirmation.get_secret_value() != password.get_secret_value():
        raise ValueError("The password confirmation does not match.")


class UserCreate(_ApiModel):
    """Request body for creating a user."""

    name: str = Field(
        ...,
        min_length=2,
        max_length=255,
        pattern=NAME_PATTERN,
        description="Letters and spaces only.",
        examples=["Ada Lovelace"],
    )
    email: EmailStr = Field(..., examples=["ada@example.com"])
    password: SecretStr = Field(
        ...,
        min_length=8,
        description="Min 8 chars with at least one upper, one lower and one digit.",
    )
    password_confirmation: SecretStr = Field(..., description="Must equal ``password``.")
    dob: date | None = Field(default=None, examples=["1990-12-10"])
    is_active: bool = True
    level: int = Field(default=MIN_LEVEL, ge=MIN_LEVEL, le=MAX_LEVEL)
    rating: Decimal | None = Field(default=None, ge=0, le=10, examples=[4.5])
    metadata: dict[str, str] | None = Field(default=None, examples=[{"team": "core"}])

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: SecretStr) -> SecretStr:
        _check_password_strength(v.get_secret_value())
        return v

    @field_validator("dob")
    @classmethod
    def _validate_dob(cls, v: date | None) -> date | None:
        return _check_dob(v)

    @field_validator("rating")
    @classmethod
    def _validate_rating(cls, v: Decimal | None, info: ValidationInfo) -> Decimal | None:
        return _check_rating_for_level(v, info.data.get("level"))

    @field_validator("metadata")
    @classmethod
    def _validate_metadata(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        return _check_metadata(v)

    @model_validator(mode="after")
    def _validate_confirmation(self) -> UserCreate:
        _check_password_confirmation(self.password, self.password_confirmation)
        return self


class UserUpdate(_ApiModel):
    """Request body for a partial user update; omitted or null fields are kept."""

    name: str | None = Field(default=None, min_length=2, max_length=255, pattern=NAME_PATTERN)
    email: EmailStr | None = None
    password: SecretStr | None = Field(default=None, min_length=8)
    password_confirmation: SecretStr | None = None
    dob: date | None = None
    is_active: bool | None = None
    level: int | None = Field(default=None, ge=MIN_LEVEL, le=MAX_LEVEL)
    rating: Decimal | None = Field(default=None, ge=0, le=10)
    metadata: dict[str, str] | None = None

    @field_validator("password")
    @classmethod
    def _validate_password(cls, v: SecretStr | None) -> SecretStr | None:
        if v is not None:
            _check_password_strength(v.get_secret_value())
        return v

    @field_validator("dob")
    @classmethod
    def _validate_dob(cls, v: date | None) -> date | None:
        return _check_dob(v)

    @field_validator("level")
    @classmethod
    def _validate_level(cls, v: int | None, info: ValidationInfo) -> int | None:
        if v is not None and info.data.get("is_active") is True and v < 5:
            raise ValueError("Active users must have level 5 or higher.")
        return v

    @field_validator("rating")
    @classmethod
    def _validate_rating(cls, v: Decimal | None, info: ValidationInfo) -> Decimal | None:
        return _check_rating_for_level(v, info.data.get("level"))

    @field_validator("metadata")
    @classmethod
    def _validate_metadata(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        return _check_metadata(v)

    @model_validator(mode="after")
    def _validate_confirmation(self) -> UserUpdate:
        _check_password_confirmation(self.password, self.password_confirmation)
        return self


class RatingUpdate(_ApiModel):
    """Request body for replacing a user's rating."""

    rating: Decimal = Field(..., examples=[7.25])


# ---------------------------------------------------------------------------
# User response schemas
# ---------------------------------------------------------------------------


class UserResource(_ApiModel):
    """Public representation of a user."""

    id: int = Field(..., examples=[42])
    name: str = Field(..., examples=["Ada Lovelace"])
    email: EmailStr = Field(..., examples=["ada@example.com"])
    dob: date | None = None
    is_active: bool = True
    level: int = Field(..., examples=[12])
    rating: float | None = Field(default=None, examples=[4.5])
    metadata: dict[str, str] | None = None
    email_verified_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, user: User) -> UserResource:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            dob=user.dob,
            is_active=user.is_active,
            level=user.level,
            rating=float(user.rating) if user.rating is not None else None,
            metadata=user.metadata,
            email_verified_at=user.email_verified_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserLinks(BaseModel):
    self: str
    edit: str
    delete: str


class UserEnvelope(_ApiModel):
    """A single user wrapped with its hypermedia links."""

    data: UserResource
    links: UserLinks


class UserListResponse(_ApiModel):
    """Plain (unpaginated) list of users."""

    data: list[UserResource]


class UserCollectionResponse(_ApiModel):
    """Paginated users, ``full`` shape."""

    data: list[UserResource]
    meta: PaginationMeta


class MinimalUserCollectionResponse(_ApiModel):
    """Paginated users, ``minimal`` shape."""

    data: list[UserResource]
    pagination: MinimalPagination


class MessageResponse(BaseModel):
    message: str = Field(..., examples=["User deleted successfully"])
