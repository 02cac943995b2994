"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field, field_validator

from app.core.security import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    password_fits,
)


def normalize_email(value: str) -> str:
    """Emails are compared and stored trimmed and lower-cased."""
    return value.strip().lower()


def check_password_bytes(value: str) -> str:
    if not password_fits(value):
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    return value


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    email: str = Field(..., min_length=3, max_length=255, description="Account email")
    password: str = Field(
        ..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password"
    )

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class SignUpRequest(BaseModel):
    """Profile and credentials for a new account. Role is always "User"."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = normalize_email(v)
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_bytes(v)


class TokenPairResponse(BaseModel):
    """JWT access and refresh tokens returned after sign-in or sign-up."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer", description="Token type")


class RecoverPasswordRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class ChangePasswordRequest(BaseModel):
    """New password; authorized by a recovery token in the Authorization header."""

    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_bytes(v)


class SuccessResponse(BaseModel):
    success: bool = True


class TokenClaims(BaseModel):
    """Verified claims of a bearer token (sub is the user id)."""

    sub: str
    email: str | None = None
    role: str | None = None
    type: str | None = None
    pwd: str | None = None
