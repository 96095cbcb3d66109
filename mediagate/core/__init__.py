"""Core app configuration, logging and database."""

from mediagate.core.config import get_settings, settings
from mediagate.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
