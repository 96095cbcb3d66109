"""Request/response schemas for admin user management."""

from pydantic import Field

from mediagate.schemas.auth import CamelModel, UserOut


class CreateUserRequest(CamelModel):
    username: str = ""
    password: str = ""
    # New accounts get the restrictive default unless explicitly false.
    disable_premium: bool = True


class UpdateUserRequest(CamelModel):
    """Partial update; absent (or empty string) fields are left untouched."""

    username: str | None = None
    password: str | None = None
    disable_premium: bool | None = None


class UsersListResponse(CamelModel):
    users: list[UserOut] = Field(default_factory=list)
