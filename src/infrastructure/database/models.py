"""
SQLAlchemy 2.0+ ORM models for the user directory.

Schema layout
-------------
* ``users`` -- one row per registered user; ``email`` is unique.

Column types are dialect-neutral so the same models run on PostgreSQL in
production and on SQLite in integration tests.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from domain.models.user import User


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    """Shared declarative base for every ORM model."""
    pass


# ---------------------------------------------------------------------------
# UserModel
# ---------------------------------------------------------------------------

class UserModel(Base):
    """A registered user."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_is_active", "is_active"),
        Index("ix_users_level", "level"),
        Index("ix_users_created_at", "created_at"),
        CheckConstraint("level BETWEEN 1 AND 100", name="ck_users_level_range"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 0 AND rating <= 10)",
            name="ck_users_rating_range",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    dob: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    rating: Mapped[Optional[Decimal]] = mapped_column(Numeric(4, 2), nullable=True)
    # ``metadata`` is reserved on declarative classes.
    metadata_json: Mapped[Optional[dict]] = mapped_column("metadata", JSON, nullable=True)
    email_verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, email={self.email!r})>"

    # -- domain mapping ---------------------------------------------------

    @classmethod
    def from_domain(cls, user: User) -> UserModel:
        model = cls()
        model.apply(user)
        if user.id:
            model.id = user.id
        model.created_at = user.created_at
        return model

    def apply(self, user: User) -> None:
        """Copy mutable domain fields onto this row."""
        self.name = user.name
        self.email = user.email
        self.password = user.hashed_password
        self.dob = user.dob
        self.is_active = user.is_active
        self.level = user.level
        self.rating = user.rating
        self.metadata_json = user.metadata
        self.email_verified_at = user.email_verified_at
        self.updated_at = user.updated_at

    def to_domain(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            hashed_password=self.password,
            dob=self.dob,
            is_active=self.is_active,
            level=self.level,
            rating=self.rating,
            metadata=self.metadata_json,
            email_verified_at=self.email_verified_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
