"""Pydantic schemas for user profile responses and partial updates."""

from datetime import datetime

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import UserRole
from app.schemas.auth import check_password_bytes, normalize_email


class UserResponse(BaseModel):
    """User profile (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpdateUserRequest(BaseModel):
    """
    Partial profile update. Only fields present in the body are written.

    Changing the password requires current_password. Role and id are not
    patchable here. newPassword/oldPassword are accepted as aliases of
    password/current_password.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, min_length=1, max_length=255)
    last_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, min_length=3, max_length=255)
    phone: str | None = Field(default=None, min_length=1, max_length=32)
    password: str | None = Field(
        default=None,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        validation_alias=AliasChoices("password", "newPassword"),
    )
    current_password: str | None = Field(
        default=None,
        max_length=PASSWORD_MAX_LEN,
        validation_alias=AliasChoices("current_password", "oldPassword"),
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = normalize_email(v)
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return v if v is None else check_password_bytes(v)

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "UpdateUserRequest":
        for name in ("first_name", "last_name", "email", "phone", "password"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
