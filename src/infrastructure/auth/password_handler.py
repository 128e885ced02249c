"""
Password hashing for stored user credentials, using Argon2id.

Implements the application's ``PasswordHasher`` port so the user DTO can
hash passwords without knowing the algorithm.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

if TYPE_CHECKING:
    from infrastructure.settings import AppSettings


class PasswordHandler:
    """
    Thin wrapper around argon2-cffi.

    Defaults follow the OWASP parameters for interactive logins
    (3 iterations, 64 MiB, 4 lanes); tests pass cheaper values.
    """

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ) -> None:
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=Type.ID,
        )

    @classmethod
    def from_settings(cls, settings: AppSettings) -> PasswordHandler:
        return cls(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
        )

    def hash_password(self, plain_password: str) -> str:
        """Return the encoded Argon2id string (parameters and salt included)."""
        return self._hasher.hash(plain_password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """``False`` on mismatch or when *hashed_password* is malformed."""
        try:
            return self._hasher.verify(hashed_password, plain_password)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, hashed_password: str) -> bool:
        """Whether *hashed_password* was produced with different parameters."""
        return self._hasher.check_needs_rehash(hashed_password)
