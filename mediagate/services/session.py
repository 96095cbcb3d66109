"""Resolve the current user from a session token plus a fresh credential-store read."""

from sqlalchemy.orm import Session

from mediagate.core.security import TokenClaims, verify_token
from mediagate.models import User
from mediagate.schemas.auth import CurrentUser


def resolve_claims(db: Session, claims: TokenClaims | None) -> CurrentUser | None:
    """
    Turn verified claims into the stored identity, or None.

    Only the user id is taken from the token. Role and feature flags come from the
    stored row, so admin edits apply on the next request, and a deleted account
    stops resolving even while its token is still cryptographically valid.
    """
    if claims is None:
        return None
    user = db.get(User, claims.user_id)
    if user is None:
        return None
    return CurrentUser(
        id=user.id,
        username=user.username,
        is_admin=bool(user.is_admin),
        disable_premium=bool(user.disable_premium),
    )


def resolve_current_user(db: Session, token: str | None) -> CurrentUser | None:
    """Verify ``token`` and resolve it against the credential store."""
    return resolve_claims(db, verify_token(token))
