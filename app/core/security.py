"""Password hashing and JWT signing/verification for session and recovery tokens."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Mapping

import bcrypt
import jwt

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds), a.k.a. work factor.
BCRYPT_ROUNDS = 10

# Min/max lengths for password validation.
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
# bcrypt only reads the first 72 bytes; longer passwords are rejected, not truncated.
PASSWORD_MAX_BYTES = 72

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"
TOKEN_TYPE_RECOVERY = "recovery"


def password_fits(plain_password: str) -> bool:
    return len(plain_password.encode("utf-8")) <= PASSWORD_MAX_BYTES


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if not password_fits(plain_password):
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
    pw_bytes = plain_password.encode("utf-8")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    if not password_fits(plain_password):
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def password_fingerprint(hashed: str) -> str:
    """Short digest of a stored hash; changes whenever the password is reset."""
    return hashlib.sha256(hashed.encode("utf-8")).hexdigest()[:16]


class InvalidTokenTypeError(jwt.InvalidTokenError):
    """Raised when a valid JWT carries a different "type" claim than expected."""


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class TokenService:
    """
    Signs arbitrary claim mappings into HS256 (or configured) JWTs.

    Every token gets iat/exp; sign() defaults to the access-token lifetime.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_expires: timedelta = timedelta(minutes=60),
        refresh_expires: timedelta = timedelta(days=7),
        recovery_expires: timedelta = timedelta(minutes=30),
    ) -> None:
        self._secret = secret
        self.algorithm = algorithm
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires
        self.recovery_expires = recovery_expires

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            access_expires=timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES),
            refresh_expires=timedelta(minutes=settings.JWT_REFRESH_EXPIRE_MINUTES),
            recovery_expires=timedelta(minutes=settings.RECOVERY_TOKEN_EXPIRE_MINUTES),
        )

    def sign(self, payload: Mapping[str, Any], expires_in: timedelta | None = None) -> str:
        """Sign payload with iat and exp; expires_in overrides the access lifetime."""
        now = datetime.now(UTC)
        claims: dict[str, Any] = dict(payload)
        claims["iat"] = now
        claims["exp"] = now + (expires_in if expires_in is not None else self.access_expires)
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def issue_pair(self, claims: Mapping[str, Any]) -> TokenPair:
        """Access and refresh tokens from the same claims, told apart by type and exp."""
        return TokenPair(
            access_token=self.sign({**claims, "type": TOKEN_TYPE_ACCESS}),
            refresh_token=self.sign(
                {**claims, "type": TOKEN_TYPE_REFRESH},
                expires_in=self.refresh_expires,
            ),
        )

    def issue_recovery(self, subject: str, fingerprint: str | None = None) -> str:
        claims: dict[str, Any] = {"sub": str(subject), "type": TOKEN_TYPE_RECOVERY}
        if fingerprint is not None:
            claims["pwd"] = fingerprint
        return self.sign(
            claims,
            expires_in=self.recovery_expires,
        )

    def decode(self, token: str, expected_type: str | None = None) -> dict[str, Any]:
        """
        Decode and validate JWT; return payload.
        Raises jwt.PyJWTError on invalid or expired token, or on a type mismatch.
        """
        payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        if expected_type is not None and payload.get("type") != expected_type:
            raise InvalidTokenTypeError(f"Expected a {expected_type} token")
        return payload
