"""Account workflows: sign-up, sign-in, profile lookup, password recovery and change."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from app.core.security import (
    TokenPair,
    TokenService,
    hash_password,
    password_fingerprint,
    verify_password,
)
from app.models import User, UserRole
from app.schemas.auth import SignUpRequest, TokenClaims, normalize_email
from app.services.errors import (
    AccountExistsError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from app.services.mailer import Mailer, MailNotConfiguredError
from app.services.user_store import UserStore

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

RECOVERY_SUBJECT = "Password recovery - {app_name}"

RECOVERY_BODY = (
    "Hello! You requested a password recovery. To change your password, "
    "open the following link: {link}\n\n"
    "The link expires in {minutes} minutes. If you did not request it, ignore this email."
)


class AccountService:
    """
    Orchestrates the authentication workflow over a user store, a token
    service and a mailer. Holds no per-user state between calls.
    """

    def __init__(
        self,
        store: UserStore,
        tokens: TokenService,
        mailer: Mailer,
        *,
        app_name: str,
        app_url: str,
        password_reset_path: str,
        mail_sender: str | None,
    ) -> None:
        self.store = store
        self.tokens = tokens
        self.mailer = mailer
        self.app_name = app_name
        self.app_url = app_url.rstrip("/")
        self.password_reset_path = password_reset_path
        self.mail_sender = mail_sender

    @classmethod
    def from_settings(
        cls,
        store: UserStore,
        settings: Settings,
        tokens: TokenService | None = None,
        mailer: Mailer | None = None,
    ) -> AccountService:
        return cls(
            store,
            tokens or TokenService.from_settings(settings),
            mailer or Mailer.from_settings(settings),
            app_name=settings.APP_NAME,
            app_url=settings.APP_URL,
            password_reset_path=settings.PASSWORD_RESET_PATH,
            mail_sender=settings.mail_sender,
        )

    async def sign_in(self, email: str, password: str) -> TokenPair:
        """
        Verify credentials and issue an access/refresh token pair.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        """
        user = await asyncio.to_thread(self.store.get_by_email, normalize_email(email))
        if user is None or not await asyncio.to_thread(verify_password, password, user.password):
            logger.info("Sign-in rejected")
            raise InvalidCredentialsError()
        return self.tokens.issue_pair(_session_claims(user))

    async def sign_up(self, data: SignUpRequest) -> TokenPair:
        """Create a "User" account and sign in with the same credentials."""
        email = normalize_email(data.email)
        if await asyncio.to_thread(self.store.get_by_email, email) is not None:
            raise AccountExistsError()
        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            email=email,
            phone=data.phone,
            password=await asyncio.to_thread(hash_password, data.password),
            role=UserRole.USER,
        )
        await asyncio.to_thread(self.store.add, user)
        logger.info("Account created: id=%s", user.id)
        return await self.sign_in(email, data.password)

    async def get_profile(self, claims: TokenClaims) -> User | None:
        """Look up the token subject; None when the account no longer exists."""
        return await asyncio.to_thread(self.store.get, claims.sub)

    async def recover_password(self, email: str) -> dict[str, bool]:
        """Email a recovery link carrying a short-lived recovery token."""
        user = await asyncio.to_thread(self.store.get_by_email, normalize_email(email))
        if user is None:
            raise UserNotFoundError()
        if not self.mail_sender:
            raise MailNotConfiguredError("Mail sender is not configured; set MAIL_FROM or MAIL_USERNAME.")

        token = self.tokens.issue_recovery(user.id, password_fingerprint(user.password))
        minutes = int(self.tokens.recovery_expires.total_seconds() // 60)
        await self.mailer.send(
            sender=f"{self.app_name} <{self.mail_sender}>",
            to=user.email,
            subject=RECOVERY_SUBJECT.format(app_name=self.app_name),
            body=RECOVERY_BODY.format(link=self.recovery_link(token), minutes=minutes),
        )
        logger.info("Recovery email sent: user_id=%s", user.id)
        return {"success": True}

    async def change_password(
        self,
        user_id: str,
        password: str,
        fingerprint: str | None = None,
    ) -> dict[str, bool]:
        """
        Overwrite the stored hash. The caller's authority (a valid recovery
        token for user_id) is checked before this is called.

        When fingerprint is given it must match the current hash, so a
        recovery token stops working once it has been used.
        """
        user = await asyncio.to_thread(self.store.get, user_id)
        if user is None:
            raise UserNotFoundError()
        if fingerprint is not None and fingerprint != password_fingerprint(user.password):
            raise InvalidCredentialsError("Recovery link has already been used.")
        user.password = await asyncio.to_thread(hash_password, password)
        await asyncio.to_thread(self.store.save, user)
        logger.info("Password changed: user_id=%s", user.id)
        return {"success": True}

    def recovery_link(self, token: str) -> str:
        return f"{self.app_url}{self.password_reset_path}?token={token}"


def _session_claims(user: User) -> dict[str, str]:
    role = user.role.value if isinstance(user.role, UserRole) else str(user.role)
    return {"sub": str(user.id), "email": user.email, "role": role}
