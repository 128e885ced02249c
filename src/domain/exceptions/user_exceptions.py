from __future__ import annotations


class DomainError(Exception):
    """Base class for all domain-layer exceptions.

    Carries HTTP-mapping metadata so the presentation layer can produce
    RFC 9457 Problem Details without knowing exception internals.
    """

    def __init__(
        self,
        detail: str = "",
        *,
        title: str = "Domain Error",
        status_code: int = 400,
        error_type: str = "about:blank",
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.title = title
        self.status_code = status_code
        self.error_type = error_type


class InvalidArgumentError(DomainError):
    """A caller passed a value outside the accepted range.

    Represents a programming error on the caller's side; it is never
    retried.
    """

    def __init__(self, detail: str = "", *, argument: str = "") -> None:
        self.argument = argument
        super().__init__(
            detail=detail or f"Invalid argument: {argument}",
            title="Invalid Argument",
            status_code=400,
            error_type="https://api.users.example/problems/invalid-argument",
        )


class UserNotFoundError(DomainError):
    def __init__(self, user_id: str = "") -> None:
        self.user_id = user_id
        super().__init__(
            detail=f"User not found: {user_id}",
            title="User Not Found",
            status_code=404,
            error_type="https://api.users.example/problems/user-not-found",
        )


class UserAlreadyExistsError(DomainError):
    def __init__(self, email: str = "") -> None:
        self.email = email
        super().__init__(
            detail=f"This email address is already taken: {email}",
            title="User Conflict",
            status_code=409,
            error_type="https://api.users.example/problems/user-conflict",
        )
