"""Cookie login/logout, current-user lookup and auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from mediagate.api.errors import to_http_exception
from mediagate.core.config import settings
from mediagate.core.database import get_db
from mediagate.core.security import issue_token, verify_token
from mediagate.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    SuccessResponse,
    UserOut,
    UserResponse,
)
from mediagate.services import users as user_service
from mediagate.services.session import resolve_claims

router = APIRouter()

SESSION_MAX_AGE_SECONDS = settings.TOKEN_EXPIRE_HOURS * 60 * 60


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE_SECONDS,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def get_current_user(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: the identity for this request, re-read from the credential store.

    The interceptor has already verified the cookie and left its claims on
    request.state; the cookie is verified here only when that did not happen.
    Raises 401 if there is no valid token or the account no longer exists.
    """
    claims = getattr(request.state, "session", None)
    if claims is None:
        claims = verify_token(request.cookies.get(settings.COOKIE_NAME))
    user = resolve_claims(db, claims)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require a stored admin account. Raises 403 for non-admin."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.post("/login", response_model=UserResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Check credentials, set a fresh session cookie and return the user."""
    try:
        user = user_service.authenticate(db, body.username, body.password)
    except user_service.UserServiceError as exc:
        raise to_http_exception(exc)
    set_session_cookie(response, issue_token(user))
    return UserResponse(user=UserOut.model_validate(user))


@router.post("/logout", response_model=SuccessResponse)
def logout(response: Response) -> SuccessResponse:
    """Drop the session cookie. The token itself stays valid until it expires."""
    response.delete_cookie(settings.COOKIE_NAME, path="/")
    return SuccessResponse()


@router.get("/me", response_model=UserResponse)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    user = user_service.get_user(db, current_user.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return UserResponse(user=UserOut.model_validate(user))


@router.put("/password", response_model=SuccessResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> SuccessResponse:
    try:
        user_service.change_own_password(
            db, current_user.id, body.current_password, body.new_password
        )
    except user_service.UserServiceError as exc:
        raise to_http_exception(exc)
    return SuccessResponse()
