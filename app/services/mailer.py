"""Outgoing email over SMTP (STARTTLS + login when credentials are configured)."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class MailNotConfiguredError(Exception):
    """Raised when an email is sent but MAIL_HOST (or a sender address) is missing."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class Mailer:
    """Sends plain-text messages. Delivery errors are not caught here."""

    def __init__(
        self,
        host: str | None,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> Mailer:
        password = settings.MAIL_PASSWORD.get_secret_value() if settings.MAIL_PASSWORD else None
        return cls(
            host=settings.MAIL_HOST,
            port=settings.MAIL_PORT,
            username=settings.MAIL_USERNAME,
            password=password,
            use_tls=settings.MAIL_USE_TLS,
            timeout=settings.MAIL_TIMEOUT_SEC,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.host.strip())

    def build_message(self, sender: str, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    async def send(self, *, sender: str, to: str, subject: str, body: str) -> None:
        """Deliver one message; the blocking SMTP session runs in a worker thread."""
        if not self.is_configured:
            raise MailNotConfiguredError("Mail is not configured; set MAIL_HOST.")
        message = self.build_message(sender, to, subject, body)
        await asyncio.to_thread(self._deliver, message)
        logger.info("Email sent: to=%s subject=%r", to, subject)

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(message)
