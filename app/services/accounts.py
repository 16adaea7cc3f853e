"""Account directory: lookup, registration, login and the activation toggle."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from app.core.security import create_access_token, hash_password, verify_password
from app.models import User
from app.schemas.auth import RegisterRequest, normalize_email

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

USER_EXISTS_MESSAGE = "User already exists"
USER_NOT_FOUND_MESSAGE = "User not found"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
ACCOUNT_DEACTIVATED_MESSAGE = "Account is deactivated"


def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def find_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def list_accounts(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def create_account(
    db: Session,
    fullname: str,
    email: str,
    password_hash: str,
    role: str = "user",
    is_active: bool = True,
) -> User:
    """
    Persist a new account. Raises ConflictError if the email is taken.

    The unique index on email catches a concurrent registration that slipped
    past the lookup.
    """
    email = normalize_email(email)
    if find_by_email(db, email) is not None:
        raise ConflictError(USER_EXISTS_MESSAGE)
    user = User(
        fullname=fullname,
        email=email,
        password_hash=password_hash,
        role=role,
        is_active=is_active,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(USER_EXISTS_MESSAGE) from e
    db.refresh(user)
    return user


def register(db: Session, registration: RegisterRequest) -> User:
    """Self-service registration: always role 'user', active by default. Duplicates raise ConflictError."""
    user = create_account(
        db,
        fullname=registration.fullname,
        email=registration.email,
        password_hash=hash_password(registration.password),
    )
    logger.info("Registered account id=%s", user.id)
    return user


def authenticate(
    db: Session,
    email: str,
    password: str,
    settings: "Settings | None" = None,
) -> tuple[str, User]:
    """
    Check credentials and issue an access token.

    Raises NotFoundError (unknown email), UnauthorizedError (wrong password)
    or ForbiddenError (deactivated account), in that order.
    """
    user = find_by_email(db, email)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    if not verify_password(password, user.password_hash):
        logger.info("Failed login for account id=%s: bad password", user.id)
        raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
    if not user.is_active:
        logger.info("Refused login for deactivated account id=%s", user.id)
        raise ForbiddenError(ACCOUNT_DEACTIVATED_MESSAGE)
    secret = settings.TOKEN_SECRET.get_secret_value() if settings is not None else None
    token = create_access_token(
        sub=user.id,
        role=user.role,
        fullname=user.fullname,
        email=user.email,
        secret=secret,
    )
    return token, user


def set_active(db: Session, user_id: int, active: bool) -> User:
    """Administrative activation toggle. Raises NotFoundError for unknown ids."""
    user = find_by_id(db, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    user.is_active = active
    db.commit()
    db.refresh(user)
    logger.info("Account id=%s is_active=%s", user.id, active)
    return user
