"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models use camelCase keys; Python code uses snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class LoginRequest(CamelModel):
    """Credentials for login. Missing fields arrive as empty strings and fail with 400."""

    username: str = Field(default="", description="Username")
    password: str = Field(default="", description="Password")


class ChangePasswordRequest(CamelModel):
    """Self-service password change; the current password is re-verified."""

    current_password: str = ""
    new_password: str = ""


class UserOut(CamelModel):
    """Public user record (never includes the password digest)."""

    id: int
    username: str
    is_admin: bool
    disable_premium: bool
    created_at: datetime | None = None


class CurrentUser(CamelModel):
    """Identity freshly resolved from the credential store for the current request."""

    id: int
    username: str
    is_admin: bool
    disable_premium: bool


class UserResponse(BaseModel):
    user: UserOut


class SuccessResponse(BaseModel):
    success: bool = True
