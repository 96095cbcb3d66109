"""Auth endpoints: cookie login, /me re-resolution, password change, logout."""

import unittest

from fastapi.testclient import TestClient

from mediagate.core.config import settings
from mediagate.core.security import verify_password
from mediagate.main import app
from mediagate.services.users import delete_user, update_user
from tests.helpers import USER_PASSWORD, ApiTestCase


class TestLogin(ApiTestCase):
    def test_success_sets_session_cookie_and_returns_user(self) -> None:
        client = TestClient(app)
        resp = client.post("/api/auth/login", json={"username": "alice", "password": USER_PASSWORD})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()["user"]
        self.assertEqual(body["id"], self.user.id)
        self.assertEqual(body["username"], "alice")
        self.assertFalse(body["isAdmin"])
        self.assertTrue(body["disablePremium"])
        self.assertNotIn("passwordHash", body)
        self.assertNotIn("password_hash", body)

        set_cookie = resp.headers["set-cookie"].lower()
        self.assertIn(f"{settings.COOKIE_NAME}=", set_cookie)
        self.assertIn("httponly", set_cookie)
        self.assertIn("samesite=lax", set_cookie)
        self.assertIn("path=/", set_cookie)
        self.assertIn("max-age=86400", set_cookie)
        self.assertNotIn("; secure", set_cookie)

        self.assertEqual(client.get("/api/auth/me").json()["user"]["id"], self.user.id)

    def test_missing_fields_is_400(self) -> None:
        self.assertEqual(self.anon.post("/api/auth/login", json={"username": "alice"}).status_code, 400)
        self.assertEqual(self.anon.post("/api/auth/login", json={}).status_code, 400)

    def test_wrong_password_and_unknown_user_look_the_same(self) -> None:
        wrong = self.anon.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})
        unknown = self.anon.post("/api/auth/login", json={"username": "ghost", "password": "nope-nope"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertNotIn("set-cookie", wrong.headers)

    def test_malformed_body_is_400(self) -> None:
        resp = self.anon.post(
            "/api/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)

    def test_each_login_issues_an_independent_session(self) -> None:
        first, second = TestClient(app), TestClient(app)
        creds = {"username": "alice", "password": USER_PASSWORD}
        first.post("/api/auth/login", json=creds)
        second.post("/api/auth/login", json=creds)
        self.assertEqual(first.get("/api/auth/me").status_code, 200)
        self.assertEqual(second.get("/api/auth/me").status_code, 200)


class TestMe(ApiTestCase):
    def test_returns_fresh_flags_not_token_claims(self) -> None:
        update_user(self.db, self.user.id, disable_premium=False)
        resp = self.user_client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["user"]["disablePremium"])

    def test_deleted_user_with_valid_cookie_is_401(self) -> None:
        client = TestClient(app)
        client.post("/api/auth/login", json={"username": "alice", "password": USER_PASSWORD})
        self.assertEqual(client.get("/api/auth/me").json()["user"]["id"], self.user.id)

        resp = self.admin_client.delete(f"/api/admin/users/{self.user.id}")
        self.assertEqual(resp.status_code, 200)

        resp = client.get("/api/auth/me")
        self.assertEqual(resp.status_code, 401)

    def test_deleted_user_cannot_read_or_write_buckets(self) -> None:
        delete_user(self.db, self.user.id, acting_user_id=self.admin.id)
        self.assertEqual(self.user_client.get("/api/user/data?key=settings").status_code, 401)
        resp = self.user_client.put("/api/user/data", json={"key": "settings", "value": {}})
        self.assertEqual(resp.status_code, 401)


class TestChangePassword(ApiTestCase):
    def test_success(self) -> None:
        resp = self.user_client.put(
            "/api/auth/password",
            json={"currentPassword": USER_PASSWORD, "newPassword": "brand-new-pw"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True})
        self.assertTrue(verify_password("brand-new-pw", self.reload(self.user.id).password_hash))

    def test_wrong_current_password_is_401(self) -> None:
        resp = self.user_client.put(
            "/api/auth/password",
            json={"currentPassword": "not-it", "newPassword": "brand-new-pw"},
        )
        self.assertEqual(resp.status_code, 401)
        self.assertTrue(verify_password(USER_PASSWORD, self.reload(self.user.id).password_hash))

    def test_short_or_missing_is_400(self) -> None:
        short = self.user_client.put(
            "/api/auth/password",
            json={"currentPassword": USER_PASSWORD, "newPassword": "12345"},
        )
        missing = self.user_client.put("/api/auth/password", json={"currentPassword": USER_PASSWORD})
        self.assertEqual(short.status_code, 400)
        self.assertEqual(missing.status_code, 400)
        self.assertIn("at least 6", short.json()["detail"])

    def test_admin_can_change_own_password(self) -> None:
        resp = self.admin_client.put(
            "/api/auth/password",
            json={"currentPassword": "Admin@1234", "newPassword": "Admin@5678"},
        )
        self.assertEqual(resp.status_code, 200)


class TestLogout(ApiTestCase):
    def test_logout_clears_cookie(self) -> None:
        client = TestClient(app)
        client.post("/api/auth/login", json={"username": "alice", "password": USER_PASSWORD})
        resp = client.post("/api/auth/logout")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("max-age=0", resp.headers["set-cookie"].lower())
        self.assertEqual(client.get("/api/auth/me").status_code, 401)

    def test_logout_requires_session(self) -> None:
        self.assertEqual(self.anon.post("/api/auth/logout").status_code, 401)


if __name__ == "__main__":
    unittest.main()
