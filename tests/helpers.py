"""Shared fixtures for API tests: fresh SQLite schema per test and user/session helpers."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from mediagate.core.config import settings
from mediagate.core.database import SessionLocal, engine
from mediagate.core.security import issue_token
from mediagate.main import app
from mediagate.models import Base, User
from mediagate.services.users import create_user

ADMIN_PASSWORD = "Admin@1234"
USER_PASSWORD = "secret123"


class ApiTestCase(unittest.TestCase):
    """Recreates the schema, seeds one admin and one regular user, and exposes clients."""

    def setUp(self) -> None:
        rounds = patch("mediagate.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)

        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
        self.db = SessionLocal()
        self.addCleanup(self.db.close)

        self.admin = create_user(self.db, "admin", ADMIN_PASSWORD, disable_premium=False, is_admin=True)
        self.user = create_user(self.db, "alice", USER_PASSWORD)

        self.anon = TestClient(app)
        self.admin_client = self.client_for(self.admin)
        self.user_client = self.client_for(self.user)

    def client_for(self, user: User) -> TestClient:
        """Client carrying a freshly issued session cookie for ``user``."""
        return TestClient(app, cookies={settings.COOKIE_NAME: issue_token(user)})

    def reload(self, user_id: int) -> User | None:
        self.db.expire_all()
        return self.db.get(User, user_id)
