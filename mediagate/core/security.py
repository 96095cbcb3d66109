"""Password hashing and session token issue/verification."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from mediagate.core.config import settings

if TYPE_CHECKING:
    from mediagate.models.user import User

# Bcrypt cost (rounds).
BCRYPT_ROUNDS = 12

USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified session token."""

    user_id: int
    username: str
    is_admin: bool
    issued_at: datetime
    expires_at: datetime


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def issue_token(user: "User", now: datetime | None = None) -> str:
    """Sign a session token carrying userId, username and isAdmin with a fixed lifetime."""
    issued = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        "userId": user.id,
        "username": user.username,
        "isAdmin": bool(user.is_admin),
        "iat": issued,
        "exp": issued + timedelta(hours=settings.TOKEN_EXPIRE_HOURS),
    }
    return jwt.encode(
        payload,
        settings.AUTH_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_token(token: str | None) -> TokenClaims | None:
    """
    Return the claims of a valid token, or None.

    Expired, forged and malformed tokens all yield None; callers treat that as
    "not authenticated" and never learn which check failed.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
        user_id = payload["userId"]
        username = payload["username"]
        is_admin = payload["isAdmin"]
    except (jwt.PyJWTError, KeyError):
        return None
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    if not isinstance(username, str) or not isinstance(is_admin, bool):
        return None
    return TokenClaims(
        user_id=user_id,
        username=username,
        is_admin=is_admin,
        issued_at=datetime.fromtimestamp(payload["iat"], UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], UTC),
    )
