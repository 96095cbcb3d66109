"""User lifecycle: login lookup, admin CRUD and self-service password change."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mediagate.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
    verify_password,
)
from mediagate.models import User, UserData

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base for user operation failures; ``message`` is safe to show to clients."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserValidationError(UserServiceError):
    """Missing, empty or out-of-range input."""


class UserConflictError(UserServiceError):
    """Username already taken."""


class UserNotFoundError(UserServiceError):
    """No user with the requested id."""


class ProtectedUserError(UserServiceError):
    """Operation refused on an admin account or on the caller's own account."""


class InvalidCredentialsError(UserServiceError):
    """Password did not match the stored digest."""


def _normalize_username(username: str | None) -> str:
    name = (username or "").strip()
    if not (USERNAME_MIN_LEN <= len(name) <= USERNAME_MAX_LEN):
        raise UserValidationError("Username must be 1-255 characters.")
    return name


def _validate_password(password: str | None, label: str = "Password") -> str:
    if not password:
        raise UserValidationError(f"{label} is required.")
    if len(password) < PASSWORD_MIN_LEN:
        raise UserValidationError(f"{label} must be at least {PASSWORD_MIN_LEN} characters.")
    if len(password) > PASSWORD_MAX_LEN:
        raise UserValidationError(f"{label} must be at most {PASSWORD_MAX_LEN} characters.")
    return password


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Return the user for a username/password pair.

    Unknown usernames and wrong passwords raise the same InvalidCredentialsError
    so callers cannot enumerate accounts.
    """
    if not username or not password:
        raise UserValidationError("Username and password are required.")
    user = get_user_by_username(db, username.strip())
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Invalid username or password.")
    return user


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def create_user(
    db: Session,
    username: str,
    password: str,
    disable_premium: bool = True,
    is_admin: bool = False,
) -> User:
    """
    Create an account. Raises UserValidationError or UserConflictError before writing.

    is_admin is only set by the bootstrap CLI; the HTTP layer never passes it.
    """
    if not username or not username.strip() or not password:
        raise UserValidationError("Username and password are required.")
    name = _normalize_username(username)
    _validate_password(password)
    if get_user_by_username(db, name) is not None:
        raise UserConflictError("Username already exists.")

    user = User(
        username=name,
        password_hash=hash_password(password),
        is_admin=is_admin,
        disable_premium=disable_premium,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request won the unique constraint on username.
        db.rollback()
        raise UserConflictError("Username already exists.")
    db.refresh(user)
    logger.info("Created user id=%s username=%s admin=%s", user.id, user.username, user.is_admin)
    return user


def update_user(
    db: Session,
    user_id: int,
    username: str | None = None,
    password: str | None = None,
    disable_premium: bool | None = None,
) -> User:
    """
    Apply a partial update. None or empty-string fields are treated as absent;
    an update with nothing to change returns the row untouched.

    Admin accounts keep their username: a rename attempt is refused here, not
    only by the admin UI.
    """
    target = get_user(db, user_id)
    if target is None:
        raise UserNotFoundError("User not found.")

    changes: dict[str, object] = {}
    if username:
        name = _normalize_username(username)
        if name != target.username:
            if target.is_admin:
                raise ProtectedUserError("Admin username cannot be changed.")
            if get_user_by_username(db, name) is not None:
                raise UserConflictError("Username already exists.")
            changes["username"] = name
    if password:
        changes["password_hash"] = hash_password(_validate_password(password))
    if disable_premium is not None and disable_premium != target.disable_premium:
        changes["disable_premium"] = disable_premium

    if not changes:
        return target

    for field, value in changes.items():
        setattr(target, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UserConflictError("Username already exists.")
    db.refresh(target)
    logger.info("Updated user id=%s fields=%s", target.id, sorted(changes))
    return target


def delete_user(db: Session, user_id: int, acting_user_id: int) -> None:
    """Delete a non-admin account other than the caller's, with all its data buckets."""
    if user_id == acting_user_id:
        raise ProtectedUserError("You cannot delete your own account.")
    target = get_user(db, user_id)
    if target is None:
        raise UserNotFoundError("User not found.")
    if target.is_admin:
        raise ProtectedUserError("Admin accounts cannot be deleted.")

    db.query(UserData).filter(UserData.user_id == user_id).delete(synchronize_session=False)
    db.delete(target)
    db.commit()
    logger.info("Deleted user id=%s (by user id=%s)", user_id, acting_user_id)


def change_own_password(
    db: Session,
    user_id: int,
    current_password: str,
    new_password: str,
) -> None:
    """Replace the caller's password after re-verifying the current one."""
    if not current_password or not new_password:
        raise UserValidationError("Current password and new password are required.")
    _validate_password(new_password, label="New password")

    user = get_user(db, user_id)
    if user is None or not verify_password(current_password, user.password_hash):
        raise InvalidCredentialsError("Current password is incorrect.")

    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("User id=%s changed their password", user_id)
