"""User management API endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status

from application.schemas.pagination import PaginationShape
from application.schemas.user_dto import UserDto
from application.services.user_service import UserService
from infrastructure.auth.password_handler import PasswordHandler
from infrastructure.container import get_app_settings, get_password_handler, get_user_service
from infrastructure.settings import AppSettings

from .resources import user_collection, user_envelope, user_resource
from .schemas import (
    ErrorResponse,
    MessageResponse,
    RatingUpdate,
    UserCollectionResponse,
    UserCreate,
    UserEnvelope,
    UserListResponse,
    UserUpdate,
)

router = APIRouter(prefix="/users", tags=["Users"])


def _payload(body: UserCreate | UserUpdate) -> dict[str, Any]:
    """Validated fields as plain values; nulls dropped, secrets unwrapped."""
    data = body.model_dump(exclude_none=True, exclude={"password", "password_confirmation"})
    if body.password is not None:
        data["password"] = body.password.get_secret_value()
    return data


@router.get(
    "",
    summary="List users (paginated, newest first)",
    responses={
        200: {
            "description": "One page of users (``minimal`` layout when shape=minimal).",
            "model": UserCollectionResponse,
        },
        400: {"description": "Page size or page number out of range.", "model": ErrorResponse},
        422: {"description": "Validation error.", "model": ErrorResponse},
    },
)
def list_users(
    per_page: int | None = Query(None, description="Items per page (default 15)."),
    page: int | None = Query(None, description="Page number (default 1)."),
    shape: PaginationShape | None = Query(None, description="Collection layout."),
    service: UserService = Depends(get_user_service),
    settings: AppSettings = Depends(get_app_settings),
) -> dict[str, Any]:
    if per_page is None:
        per_page = settings.default_per_page
    result = service.list_users(per_page=per_page, page=page)
    return user_collection(result, shape or settings.pagination_shape)


@router.post(
    "",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    responses={
        201: {"description": "User created."},
        409: {"description": "Email already taken.", "model": ErrorResponse},
        422: {"description": "Validation error.", "model": ErrorResponse},
    },
)
def create_user(
    body: UserCreate,
    request: Request,
    service: UserService = Depends(get_user_service),
    hasher: PasswordHandler = Depends(get_password_handler),
) -> dict[str, Any]:
    user = service.create_user(UserDto.from_create(_payload(body), hasher))
    return user_envelope(request, user)


@router.get(
    "/active",
    response_model=UserListResponse,
    summary="List active users ordered by name",
)
def list_active_users(service: UserService = Depends(get_user_service)) -> dict[str, Any]:
    return {"data": [user_resource(u) for u in service.get_active_users()]}


@router.get(
    "/level-range",
    response_model=UserListResponse,
    summary="List users within a level range, highest level first",
    responses={400: {"description": "min_level > max_level.", "model": ErrorResponse}},
)
def list_users_by_level(
    min_level: int = Query(..., description="Minimum level (inclusive)."),
    max_level: int = Query(..., description="Maximum level (inclusive)."),
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    users = service.get_users_by_level_range(min_level, max_level)
    return {"data": [user_resource(u) for u in users]}


@router.get(
    "/{user_id}",
    response_model=UserEnvelope,
    summary="Get a user",
    responses={
        400: {"description": "Non-positive id.", "model": ErrorResponse},
        404: {"description": "User not found.", "model": ErrorResponse},
    },
)
def get_user(
    user_id: int,
    request: Request,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    return user_envelope(request, service.get_user(user_id))


_UPDATE_RESPONSES: dict[int | str, dict[str, Any]] = {
    404: {"description": "User not found.", "model": ErrorResponse},
    409: {"description": "Email already taken.", "model": ErrorResponse},
    422: {"description": "Validation error.", "model": ErrorResponse},
}


@router.put(
    "/{user_id}",
    response_model=UserEnvelope,
    summary="Update a user (partial, PUT)",
    operation_id="update_user_put",
    responses=_UPDATE_RESPONSES,
)
@router.patch(
    "/{user_id}",
    response_model=UserEnvelope,
    summary="Update a user (partial, PATCH)",
    operation_id="update_user_patch",
    responses=_UPDATE_RESPONSES,
)
def update_user(
    user_id: int,
    body: UserUpdate,
    request: Request,
    service: UserService = Depends(get_user_service),
    hasher: PasswordHandler = Depends(get_password_handler),
) -> dict[str, Any]:
    user = service.get_user(user_id)
    updated = service.update_user(user, UserDto.from_update(_payload(body), hasher))
    return user_envelope(request, updated)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete a user",
    responses={404: {"description": "User not found.", "model": ErrorResponse}},
)
def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
) -> dict[str, str]:
    service.delete_user(service.get_user(user_id))
    return {"message": "User deleted successfully"}


@router.post(
    "/{user_id}/toggle-status",
    response_model=UserEnvelope,
    summary="Flip a user's active flag",
    responses={404: {"description": "User not found.", "model": ErrorResponse}},
)
def toggle_user_status(
    user_id: int,
    request: Request,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    user = service.toggle_user_status(service.get_user(user_id))
    return user_envelope(request, user)


@router.put(
    "/{user_id}/rating",
    response_model=UserEnvelope,
    summary="Replace a user's rating",
    responses={
        400: {"description": "Rating outside 0..10.", "model": ErrorResponse},
        404: {"description": "User not found.", "model": ErrorResponse},
    },
)
def update_user_rating(
    user_id: int,
    body: RatingUpdate,
    request: Request,
    service: UserService = Depends(get_user_service),
) -> dict[str, Any]:
    user = service.update_user_rating(service.get_user(user_id), body.rating)
    return user_envelope(request, user)
