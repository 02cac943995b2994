"""Sign-in/sign-up, password recovery and auth dependencies (get_current_user)."""

import logging
import smtplib
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import (
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_RECOVERY,
    TokenService,
)
from app.schemas.auth import (
    ChangePasswordRequest,
    RecoverPasswordRequest,
    SignInRequest,
    SignUpRequest,
    SuccessResponse,
    TokenClaims,
    TokenPairResponse,
)
from app.schemas.user import UserResponse
from app.services.accounts import AccountService
from app.services.errors import (
    AccountExistsError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from app.services.mailer import MailNotConfiguredError
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def get_token_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenService:
    return TokenService.from_settings(settings)


def get_account_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AccountService:
    return AccountService.from_settings(store, settings, tokens=tokens)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_bearer(
    credentials: HTTPAuthorizationCredentials | None,
    tokens: TokenService,
    expected_type: str,
) -> TokenClaims:
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = tokens.decode(credentials.credentials, expected_type=expected_type)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    sub = payload.get("sub")
    if not sub:
        raise _unauthorized("Invalid token payload")
    return TokenClaims(
        sub=str(sub),
        email=payload.get("email"),
        role=payload.get("role"),
        type=payload.get("type"),
        pwd=payload.get("pwd"),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """Dependency: require a valid Bearer access token. Raises 401 if missing or invalid."""
    return _decode_bearer(credentials, tokens, TOKEN_TYPE_ACCESS)


def get_recovery_subject(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """Dependency: require a valid Bearer recovery token (from the recovery email link)."""
    claims = _decode_bearer(credentials, tokens, TOKEN_TYPE_RECOVERY)
    if not claims.pwd:
        raise _unauthorized("Invalid token payload")
    return claims


@router.post("/sign-in", response_model=TokenPairResponse)
async def sign_in(
    body: SignInRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> TokenPairResponse:
    """
    Authenticate with email and password; returns access and refresh tokens.
    Include the access token in the Authorization header as: Bearer <access_token>
    """
    try:
        pair = await accounts.sign_in(body.email, body.password)
    except InvalidCredentialsError as e:
        raise _unauthorized(e.message) from e
    return TokenPairResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post("/sign-up", response_model=TokenPairResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    body: SignUpRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> TokenPairResponse:
    """Register a new account (role "User") and return its first token pair."""
    try:
        pair = await accounts.sign_up(body)
    except AccountExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return TokenPairResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    claims: Annotated[TokenClaims, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UserResponse:
    user = await accounts.get_profile(claims)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return UserResponse.model_validate(user)


@router.post("/recover-password", response_model=SuccessResponse)
async def recover_password(
    body: RecoverPasswordRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> SuccessResponse:
    """Send a password recovery link to the account's email."""
    try:
        result = await accounts.recover_password(body.email)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except MailNotConfiguredError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message) from e
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Recovery email delivery failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not deliver the recovery email.",
        ) from e
    return SuccessResponse(**result)


@router.post("/change-password", response_model=SuccessResponse)
async def change_password(
    body: ChangePasswordRequest,
    claims: Annotated[TokenClaims, Depends(get_recovery_subject)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> SuccessResponse:
    """Set a new password; requires the recovery token as Bearer credentials."""
    try:
        result = await accounts.change_password(claims.sub, body.password, fingerprint=claims.pwd)
    except InvalidCredentialsError as e:
        raise _unauthorized(e.message) from e
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return SuccessResponse(**result)
