from domain.exceptions.user_exceptions import (
    DomainError,
    InvalidArgumentError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

__all__ = [
    "DomainError",
    "InvalidArgumentError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
]
