"""Unit tests for app.core.security: bcrypt hashing and access-token issue/verify."""

import re
import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.security import (
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret"
TOKEN_SHAPE = re.compile(r"^[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+$")


def _token(**kwargs: object) -> str:
    defaults: dict[str, object] = {
        "sub": 7,
        "role": "user",
        "fullname": "John Doe",
        "email": "john@example.com",
        "secret": SECRET,
    }
    defaults.update(kwargs)
    return create_access_token(**defaults)  # type: ignore[arg-type]


class TestPasswordHashing(unittest.TestCase):
    """hash_password is salted and one-way; verify_password never raises."""

    def test_verify_accepts_original_password(self) -> None:
        digest = hash_password("password123")
        self.assertTrue(verify_password("password123", digest))

    def test_verify_rejects_other_password(self) -> None:
        digest = hash_password("password123")
        self.assertFalse(verify_password("password124", digest))
        self.assertFalse(verify_password("", digest))

    def test_digest_is_not_plaintext_and_salted(self) -> None:
        first = hash_password("password123")
        second = hash_password("password123")
        self.assertNotEqual(first, "password123")
        self.assertNotEqual(first, second)
        self.assertRegex(first, r"^\$2[aby]\$\d+\$")

    def test_cost_factor_is_embedded(self) -> None:
        digest = hash_password("password123", rounds=5)
        self.assertTrue(digest.startswith("$2b$05$"))

    def test_malformed_digest_returns_false(self) -> None:
        self.assertFalse(verify_password("password123", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("password123", ""))

    def test_long_passwords_use_first_72_bytes(self) -> None:
        base = "a" * 72
        digest = hash_password(base + "tail-one")
        self.assertTrue(verify_password(base + "tail-two", digest))


class TestCreateAccessToken(unittest.TestCase):
    def test_compact_three_segment_shape(self) -> None:
        self.assertRegex(_token(), TOKEN_SHAPE)

    def test_claims_round_trip(self) -> None:
        claims = decode_access_token(_token(), SECRET)
        self.assertEqual(claims.sub, "7")
        self.assertEqual(claims.user_id, 7)
        self.assertEqual(claims.role, "user")
        self.assertEqual(claims.fullname, "John Doe")
        self.assertEqual(claims.email, "john@example.com")
        self.assertFalse(claims.is_admin)

    def test_expiry_follows_ttl(self) -> None:
        now = datetime.now(UTC).replace(microsecond=0)
        token = _token(now=now, expires_delta=timedelta(minutes=5))
        claims = decode_access_token(token, SECRET)
        self.assertEqual(claims.exp - claims.iat, timedelta(minutes=5))

    def test_claims_are_immutable(self) -> None:
        claims = decode_access_token(_token(), SECRET)
        with self.assertRaises(Exception):
            claims.role = "admin"  # type: ignore[misc]


class TestDecodeAccessToken(unittest.TestCase):
    def test_valid_immediately_after_issue(self) -> None:
        token = _token(expires_delta=timedelta(seconds=30))
        self.assertEqual(decode_access_token(token, SECRET).user_id, 7)

    def test_expired_after_ttl(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=2)
        token = _token(now=issued, expires_delta=timedelta(hours=1))
        with self.assertRaises(TokenExpiredError):
            decode_access_token(token, SECRET)

    def test_wrong_secret_is_invalid(self) -> None:
        with self.assertRaises(TokenInvalidError):
            decode_access_token(_token(), "another-secret")

    def test_tampered_payload_is_invalid(self) -> None:
        header, _payload, signature = _token(role="user").split(".")
        forged_payload = _token(role="admin", secret="attacker").split(".")[1]
        with self.assertRaises(TokenInvalidError):
            decode_access_token(f"{header}.{forged_payload}.{signature}", SECRET)

    def test_malformed_token_is_invalid(self) -> None:
        for token in ("", "abc", "a.b", "a.b.c", "invalid-token"):
            with self.subTest(token=token):
                with self.assertRaises(TokenInvalidError):
                    decode_access_token(token, SECRET)

    def test_missing_exp_is_invalid(self) -> None:
        token = jwt.encode(
            {"sub": "1", "role": "user", "iat": datetime.now(UTC)},
            SECRET,
            algorithm="HS256",
        )
        with self.assertRaises(TokenInvalidError):
            decode_access_token(token, SECRET)

    def test_non_numeric_subject_is_invalid(self) -> None:
        with self.assertRaises(TokenInvalidError):
            decode_access_token(_token(sub="alice"), SECRET)

    def test_unknown_role_is_invalid(self) -> None:
        with self.assertRaises(TokenInvalidError):
            decode_access_token(_token(role="superuser"), SECRET)

    def test_both_failures_share_base_class(self) -> None:
        self.assertTrue(issubclass(TokenExpiredError, TokenError))
        self.assertTrue(issubclass(TokenInvalidError, TokenError))


if __name__ == "__main__":
    unittest.main()
