"""SQLAlchemy ORM models."""

from mediagate.models.base import Base
from mediagate.models.user import User
from mediagate.models.user_data import UserData

__all__ = ["Base", "User", "UserData"]
