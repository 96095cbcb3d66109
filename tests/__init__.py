"""Test package. Points the app at an in-memory SQLite store before anything imports it."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_SECRET", "test-signing-secret-for-unit-tests-0123456789")
os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("LOG_LEVEL", "WARNING")
