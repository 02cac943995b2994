"""Pydantic request/response schemas."""

from app.schemas.auth import (
    ChangePasswordRequest,
    RecoverPasswordRequest,
    SignInRequest,
    SignUpRequest,
    SuccessResponse,
    TokenClaims,
    TokenPairResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.user import UpdateUserRequest, UserResponse

__all__ = [
    "ChangePasswordRequest",
    "HealthResponse",
    "RecoverPasswordRequest",
    "SignInRequest",
    "SignUpRequest",
    "SuccessResponse",
    "TokenClaims",
    "TokenPairResponse",
    "UpdateUserRequest",
    "UserResponse",
]
