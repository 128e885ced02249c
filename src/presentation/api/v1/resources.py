"""JSON resource transformers for users and paginated user collections."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from application.schemas.pagination import PaginatedResult, PaginationShape
from domain.models.user import User

from .schemas import UserResource


def user_resource(user: User) -> dict[str, Any]:
    """Serialize one user into its JSON-ready representation."""
    return UserResource.from_domain(user).model_dump(mode="json")


def user_links(request: Request, user: User) -> dict[str, str]:
    url = str(request.url_for("get_user", user_id=user.id))
    return {"self": url, "edit": url, "delete": url}


def user_envelope(request: Request, user: User) -> dict[str, Any]:
    return {"data": user_resource(user), "links": user_links(request, user)}


def user_collection(
    result: PaginatedResult[User],
    shape: PaginationShape = PaginationShape.FULL,
) -> dict[str, Any]:
    """Serialize a page of users in the requested collection shape."""
    return result.serialize(user_resource, shape)
