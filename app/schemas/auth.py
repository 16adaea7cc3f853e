"""Request/response schemas for auth endpoints and the verified token claims."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Role = Literal["user", "admin"]

# Min/max lengths for account input, shared with the create_user CLI.
FULLNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def normalize_email(value: str) -> str:
    """Emails are unique case-insensitively; store and compare the lower-cased form."""
    return value.strip().lower()


class RegisterRequest(BaseModel):
    """New account details. Role is not accepted here; admins are created via the CLI."""

    fullname: str = Field(
        ..., min_length=1, max_length=FULLNAME_MAX_LEN, description="Display name"
    )
    email: EmailStr = Field(..., description="Login email (case-insensitive, unique)")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )

    @field_validator("fullname")
    @classmethod
    def validate_fullname(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("fullname must be non-empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class AccountResponse(BaseModel):
    """Sanitized account (never includes the password hash)."""

    id: int
    fullname: str
    email: str
    role: str
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    """Response for POST /auth/register."""

    message: str = "User created successfully"
    user: AccountResponse


class LoginResponse(BaseModel):
    """Access token returned after successful login, plus the account it identifies."""

    message: str = "Login successful"
    token: str = Field(..., description="Signed access token; send as 'Authorization: Bearer <token>'")
    token_type: str = Field(default="bearer", description="Token type")
    user: AccountResponse


class TokenClaims(BaseModel):
    """
    Verified token payload: the only per-request identity.

    Frozen so it can be passed down the call chain without being altered.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: str
    fullname: str = ""
    email: str = ""
    role: Role
    iat: datetime
    exp: datetime

    @field_validator("sub")
    @classmethod
    def validate_sub(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError("sub must be a numeric account id")
        return v

    @property
    def user_id(self) -> int:
        return int(self.sub)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
