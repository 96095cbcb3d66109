"""
Create a user (e.g. the first admin). Run from project root:
  python -m mediagate.scripts.create_user USERNAME PASSWORD [--admin] [--allow-premium]
Example:
  python -m mediagate.scripts.create_user admin your-secure-password --admin
"""
import argparse
import sys

from sqlalchemy.orm import Session

from mediagate.core.database import SessionLocal
from mediagate.models.user import User
from mediagate.services.users import UserServiceError, create_user


def admin_exists(db: Session) -> bool:
    return db.query(User).filter(User.is_admin.is_(True)).first() is not None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a mediagate user (no registration UI).")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Seed the single admin account (refused if one already exists)",
    )
    parser.add_argument(
        "--allow-premium",
        action="store_true",
        help="Create the user with premium features enabled (admins always have them)",
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        if args.admin and admin_exists(db):
            print("An admin account already exists.", file=sys.stderr)
            return 1
        try:
            user = create_user(
                db,
                username=args.username,
                password=args.password,
                disable_premium=not (args.admin or args.allow_premium),
                is_admin=args.admin,
            )
        except UserServiceError as exc:
            print(exc.message, file=sys.stderr)
            return 1
        role = "admin" if user.is_admin else "user"
        print(f"Created user '{user.username}' (id={user.id}, role={role}).")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
