"""HTTP tests for /auth: register, login, admin user listing, bearer-token handling."""

import re
import unittest
from datetime import UTC, datetime, timedelta

from app.core.security import create_access_token
from app.models import User
from app.schemas.auth import FULLNAME_MAX_LEN, PASSWORD_MAX_LEN

from support import DEFAULT_PASSWORD, bearer, insert_user, login, make_client

TOKEN_SHAPE = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")

JOHN = {"fullname": "John Doe", "email": "john@example.com", "password": "password123"}


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.client, self.session_factory = make_client()
        self.db = self.session_factory()

    def tearDown(self) -> None:
        self.db.close()


class TestRegister(AuthApiTestCase):
    def test_register_returns_sanitized_account(self) -> None:
        response = self.client.post("/auth/register", json=JOHN)
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "User created successfully")
        self.assertEqual(body["user"]["fullname"], "John Doe")
        self.assertEqual(body["user"]["email"], "john@example.com")
        self.assertEqual(body["user"]["role"], "user")
        self.assertTrue(body["user"]["is_active"])
        self.assertIn("id", body["user"])
        self.assertNotIn("password", body["user"])
        self.assertNotIn("password_hash", body["user"])

    def test_password_is_stored_hashed(self) -> None:
        self.client.post("/auth/register", json=JOHN)
        stored = self.db.query(User).one()
        self.assertNotEqual(stored.password_hash, "password123")
        self.assertRegex(stored.password_hash, r"^\$2[aby]\$\d+\$")

    def test_duplicate_email_is_rejected(self) -> None:
        self.assertEqual(self.client.post("/auth/register", json=JOHN).status_code, 201)
        response = self.client.post(
            "/auth/register", json={**JOHN, "email": "JOHN@example.com"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "User already exists"})
        self.assertEqual(self.db.query(User).count(), 1)

    def test_role_cannot_be_self_assigned(self) -> None:
        response = self.client.post("/auth/register", json={**JOHN, "role": "admin"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["user"]["role"], "user")

    def test_invalid_fields_are_rejected(self) -> None:
        response = self.client.post(
            "/auth/register",
            json={"fullname": "", "email": "invalid-email", "password": "123"},
        )
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["error"], "Validation failed")
        self.assertTrue(body["details"])

    def test_length_limits(self) -> None:
        cases = {
            "fullname": "x" * (FULLNAME_MAX_LEN + 1),
            "password": "p" * (PASSWORD_MAX_LEN + 1),
        }
        for field, value in cases.items():
            with self.subTest(field=field):
                response = self.client.post("/auth/register", json={**JOHN, field: value})
                self.assertEqual(response.status_code, 400)
                locs = {tuple(d["loc"]) for d in response.json()["details"]}
                self.assertIn(("body", field), locs)
        at_limit = {**JOHN, "password": "p" * PASSWORD_MAX_LEN}
        self.assertEqual(self.client.post("/auth/register", json=at_limit).status_code, 201)

    def test_password_is_not_echoed_in_validation_details(self) -> None:
        response = self.client.post(
            "/auth/register",
            json={"fullname": "John", "email": "john@example.com", "password": "short7"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertNotIn("short7", response.text)

    def test_password_is_not_echoed_when_other_field_is_missing(self) -> None:
        response = self.client.post(
            "/auth/register", json={"fullname": "John", "password": "hunter2-secret"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertNotIn("hunter2-secret", response.text)


class TestLogin(AuthApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = insert_user(self.db)

    def test_login_success(self) -> None:
        response = self.client.post(
            "/auth/login", json={"email": "john@example.com", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Login successful")
        self.assertEqual(body["token_type"], "bearer")
        self.assertRegex(body["token"], TOKEN_SHAPE)
        self.assertEqual(body["user"]["id"], self.user.id)
        self.assertEqual(body["user"]["email"], "john@example.com")
        self.assertNotIn("password_hash", body["user"])

    def test_unknown_email(self) -> None:
        response = self.client.post(
            "/auth/login", json={"email": "nonexistent@example.com", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "User not found"})

    def test_wrong_password(self) -> None:
        response = self.client.post(
            "/auth/login", json={"email": "john@example.com", "password": "wrongpassword"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_deactivated_account(self) -> None:
        self.user.is_active = False
        self.db.commit()
        response = self.client.post(
            "/auth/login", json={"email": "john@example.com", "password": DEFAULT_PASSWORD}
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"error": "Account is deactivated"})

    def test_malformed_body(self) -> None:
        response = self.client.post("/auth/login", json={"email": "john@example.com"})
        self.assertEqual(response.status_code, 400)


class TestListUsers(AuthApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        insert_user(self.db, email="admin@example.com", fullname="Admin User", role="admin")
        insert_user(self.db, email="user1@example.com", fullname="User 1")
        insert_user(self.db, email="user2@example.com", fullname="User 2")

    def test_admin_sees_all_accounts(self) -> None:
        token = login(self.client, "admin@example.com")
        response = self.client.get("/auth/users", headers=bearer(token))
        self.assertEqual(response.status_code, 200)
        users = response.json()
        self.assertEqual(len(users), 3)
        for user in users:
            self.assertEqual(
                set(user), {"id", "fullname", "email", "role", "is_active", "created_at"}
            )

    def test_regular_user_is_forbidden(self) -> None:
        token = login(self.client, "user1@example.com")
        response = self.client.get("/auth/users", headers=bearer(token))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"error": "Admin access required"})

    def test_missing_token(self) -> None:
        response = self.client.get("/auth/users")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Not authenticated"})

    def test_invalid_token(self) -> None:
        response = self.client.get("/auth/users", headers=bearer("invalid-token"))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid or expired token"})
        self.assertEqual(response.headers["WWW-Authenticate"], "Bearer")

    def test_expired_and_forged_tokens_look_the_same(self) -> None:
        expired = create_access_token(
            sub=1,
            role="admin",
            now=datetime.now(UTC) - timedelta(hours=2),
            expires_delta=timedelta(hours=1),
        )
        forged = create_access_token(sub=1, role="admin", secret="not-the-server-secret")
        expired_response = self.client.get("/auth/users", headers=bearer(expired))
        forged_response = self.client.get("/auth/users", headers=bearer(forged))
        self.assertEqual(expired_response.status_code, 401)
        self.assertEqual(expired_response.json(), forged_response.json())

    def test_token_stays_valid_after_deactivation(self) -> None:
        # No revocation: an issued token is honoured until it expires.
        token = login(self.client, "admin@example.com")
        admin = self.db.query(User).filter(User.email == "admin@example.com").one()
        admin.is_active = False
        self.db.commit()
        self.assertEqual(self.client.get("/auth/users", headers=bearer(token)).status_code, 200)


if __name__ == "__main__":
    unittest.main()
