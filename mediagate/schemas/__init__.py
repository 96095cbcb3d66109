"""Pydantic request/response schemas."""

from mediagate.schemas.admin import CreateUserRequest, UpdateUserRequest, UsersListResponse
from mediagate.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    SuccessResponse,
    UserOut,
    UserResponse,
)
from mediagate.schemas.user_data import (
    ClientConfigResponse,
    PutUserDataRequest,
    UserDataResponse,
)

__all__ = [
    "ChangePasswordRequest",
    "ClientConfigResponse",
    "CreateUserRequest",
    "CurrentUser",
    "LoginRequest",
    "PutUserDataRequest",
    "SuccessResponse",
    "UpdateUserRequest",
    "UserDataResponse",
    "UserOut",
    "UserResponse",
    "UsersListResponse",
]
