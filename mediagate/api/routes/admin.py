"""
Admin endpoints: user lifecycle management.

Every endpoint depends on ``require_admin``, which re-reads the caller's role
from the credential store; a demoted or deleted admin is refused even while the
interceptor still sees an admin claim in their token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mediagate.api.errors import to_http_exception
from mediagate.api.routes.auth import require_admin
from mediagate.core.database import get_db
from mediagate.schemas.admin import CreateUserRequest, UpdateUserRequest, UsersListResponse
from mediagate.schemas.auth import CurrentUser, SuccessResponse, UserOut, UserResponse
from mediagate.services import users as user_service

router = APIRouter()


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """Return every user (no password data, handled by the schema)."""
    users = user_service.list_users(db)
    return UsersListResponse(users=[UserOut.model_validate(u) for u in users])


@router.post("/users", response_model=UserResponse)
def create_user(
    body: CreateUserRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    try:
        user = user_service.create_user(
            db,
            username=body.username,
            password=body.password,
            disable_premium=body.disable_premium,
        )
    except user_service.UserServiceError as exc:
        raise to_http_exception(exc)
    return UserResponse(user=UserOut.model_validate(user))


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UpdateUserRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Partial update. An empty body succeeds and returns the row unchanged."""
    try:
        user = user_service.update_user(
            db,
            user_id,
            username=body.username,
            password=body.password,
            disable_premium=body.disable_premium,
        )
    except user_service.UserServiceError as exc:
        raise to_http_exception(exc)
    return UserResponse(user=UserOut.model_validate(user))


@router.delete("/users/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: int,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    """Delete a non-admin user other than the caller; their data buckets go with them."""
    try:
        user_service.delete_user(db, user_id, acting_user_id=admin.id)
    except user_service.UserServiceError as exc:
        raise to_http_exception(exc)
    return SuccessResponse()
