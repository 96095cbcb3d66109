"""Unit tests for mediagate.core.security: password hashing and session tokens."""

import base64
import json
import unittest
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import patch

import jwt

from mediagate.core.config import settings
from mediagate.core.security import (
    hash_password,
    issue_token,
    verify_password,
    verify_token,
)


def _user(user_id: int = 5, username: str = "bob", is_admin: bool = False) -> SimpleNamespace:
    return SimpleNamespace(id=user_id, username=username, is_admin=is_admin)


class TestPasswordHashing(unittest.TestCase):
    @patch("mediagate.core.security.BCRYPT_ROUNDS", 4)
    def test_hash_verifies_and_is_not_plaintext(self) -> None:
        digest = hash_password("secret123")
        self.assertNotEqual(digest, "secret123")
        self.assertTrue(verify_password("secret123", digest))
        self.assertFalse(verify_password("secret124", digest))

    def test_garbage_digest_is_rejected_not_raised(self) -> None:
        self.assertFalse(verify_password("secret123", "not-a-bcrypt-hash"))


class TestTokenRoundTrip(unittest.TestCase):
    """verify(issue(user)) recovers identity and role within the lifetime."""

    def test_round_trip_regular_user(self) -> None:
        claims = verify_token(issue_token(_user()))
        self.assertIsNotNone(claims)
        self.assertEqual(claims.user_id, 5)
        self.assertEqual(claims.username, "bob")
        self.assertFalse(claims.is_admin)

    def test_round_trip_admin(self) -> None:
        claims = verify_token(issue_token(_user(1, "admin", True)))
        self.assertTrue(claims.is_admin)
        self.assertEqual(claims.user_id, 1)

    def test_lifetime_is_24_hours(self) -> None:
        claims = verify_token(issue_token(_user()))
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(hours=24))

    def test_token_near_end_of_window_still_valid(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=23, minutes=59)
        self.assertIsNotNone(verify_token(issue_token(_user(), now=issued)))


class TestTokenRejection(unittest.TestCase):
    """Every failure mode yields the same None."""

    def test_expired(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=25)
        self.assertIsNone(verify_token(issue_token(_user(), now=issued)))

    def test_forged_with_other_secret(self) -> None:
        now = datetime.now(UTC)
        forged = jwt.encode(
            {"userId": 1, "username": "admin", "isAdmin": True, "iat": now, "exp": now + timedelta(hours=1)},
            "attacker-controlled-secret-0123456789abcdef",
            algorithm="HS256",
        )
        self.assertIsNone(verify_token(forged))

    def test_tampered_payload(self) -> None:
        token = issue_token(_user())
        header, _payload, signature = token.split(".")
        now = int(datetime.now(UTC).timestamp())
        elevated = json.dumps(
            {"userId": 5, "username": "bob", "isAdmin": True, "iat": now, "exp": now + 3600}
        ).encode()
        payload = base64.urlsafe_b64encode(elevated).rstrip(b"=").decode()
        self.assertIsNone(verify_token(".".join([header, payload, signature])))

    def test_malformed_and_empty(self) -> None:
        self.assertIsNone(verify_token("not.a.token"))
        self.assertIsNone(verify_token(""))
        self.assertIsNone(verify_token(None))

    def test_missing_identity_claims(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "5", "iat": now, "exp": now + timedelta(hours=1)},
            settings.AUTH_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        self.assertIsNone(verify_token(token))

    def test_missing_expiry(self) -> None:
        token = jwt.encode(
            {"userId": 5, "username": "bob", "isAdmin": False, "iat": datetime.now(UTC)},
            settings.AUTH_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        self.assertIsNone(verify_token(token))


if __name__ == "__main__":
    unittest.main()
