"""Password hashing and access-token creation/verification for authentication."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.auth import TokenClaims

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Base for token verification failures. Callers should not reveal the subclass to clients."""


class TokenInvalidError(TokenError):
    """Bad signature, malformed token, or missing/ill-typed claims."""


class TokenExpiredError(TokenError):
    """Signature is valid but exp <= now."""


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash; False for malformed hashes."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


def _secret(secret: str | None) -> str:
    return secret if secret is not None else settings.TOKEN_SECRET.get_secret_value()


def create_access_token(
    sub: str | int,
    role: str,
    fullname: str = "",
    email: str = "",
    *,
    secret: str | None = None,
    expires_delta: timedelta | None = None,
    now: datetime | None = None,
) -> str:
    """
    Create a signed access token (header.payload.signature) for an account.

    Claims: sub (account id), fullname, email, role, iat, exp.
    """
    issued_at = now or datetime.now(UTC)
    ttl = expires_delta or timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "fullname": fullname,
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(
        payload,
        _secret(secret),
        algorithm=settings.TOKEN_ALGORITHM,
    )


def decode_access_token(token: str, secret: str | None = None) -> TokenClaims:
    """
    Verify signature and expiry, returning immutable claims.

    Raises TokenExpiredError or TokenInvalidError (both TokenError).
    """
    try:
        payload = jwt.decode(
            token,
            _secret(secret),
            algorithms=[settings.TOKEN_ALGORITHM],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        logger.debug("Rejected expired access token")
        raise TokenExpiredError("Token has expired") from e
    except jwt.PyJWTError as e:
        logger.debug("Rejected invalid access token: %s", type(e).__name__)
        raise TokenInvalidError("Token is invalid") from e
    try:
        return TokenClaims.model_validate(payload)
    except ValidationError as e:
        raise TokenInvalidError("Token payload is invalid") from e
