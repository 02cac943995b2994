"""Unit tests for app.core.security: bcrypt hashing and typed JWT issuance."""

import unittest
from datetime import timedelta

import jwt

from app.core.security import (
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_RECOVERY,
    TOKEN_TYPE_REFRESH,
    InvalidTokenTypeError,
    TokenService,
    hash_password,
    password_fingerprint,
    verify_password,
)


class TestPasswordHashing(unittest.TestCase):
    """hash_password produces salted bcrypt hashes; verify_password checks them."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("correct horse")
        self.assertNotEqual(hashed, "correct horse")
        self.assertTrue(hashed.startswith("$2b$10$"))
        self.assertTrue(verify_password("correct horse", hashed))
        self.assertFalse(verify_password("wrong horse", hashed))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(hash_password("same-password"), hash_password("same-password"))

    def test_malformed_hash_does_not_verify(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))

    def test_password_over_72_bytes_is_not_hashed(self) -> None:
        # 40 two-byte characters: under the character limit, over the byte limit.
        with self.assertRaises(ValueError):
            hash_password("\u00e9" * 40)
        hash_password("a" * 72)

    def test_longer_password_sharing_72_byte_prefix_does_not_verify(self) -> None:
        hashed = hash_password("a" * 72)
        self.assertTrue(verify_password("a" * 72, hashed))
        self.assertFalse(verify_password("a" * 72 + "suffix", hashed))

    def test_fingerprint_follows_the_stored_hash(self) -> None:
        first = hash_password("same-password")
        second = hash_password("same-password")
        self.assertEqual(password_fingerprint(first), password_fingerprint(first))
        self.assertNotEqual(password_fingerprint(first), password_fingerprint(second))
        self.assertEqual(len(password_fingerprint(first)), 16)


class TestTokenService(unittest.TestCase):
    """TokenService signs claims with iat/exp and distinguishes token types."""

    def setUp(self) -> None:
        self.tokens = TokenService(
            "test-secret",
            access_expires=timedelta(minutes=15),
            refresh_expires=timedelta(days=7),
            recovery_expires=timedelta(minutes=30),
        )

    def test_sign_defaults_to_access_lifetime(self) -> None:
        payload = self.tokens.decode(self.tokens.sign({"sub": "u1"}))
        self.assertEqual(payload["sub"], "u1")
        self.assertEqual(payload["exp"] - payload["iat"], 15 * 60)

    def test_sign_honours_expiry_override(self) -> None:
        token = self.tokens.sign({"sub": "u1"}, expires_in=timedelta(minutes=5))
        payload = self.tokens.decode(token)
        self.assertEqual(payload["exp"] - payload["iat"], 5 * 60)

    def test_issue_pair_has_distinct_types_and_expiries(self) -> None:
        pair = self.tokens.issue_pair({"sub": "u1", "email": "a@b.com"})
        access = self.tokens.decode(pair.access_token, expected_type=TOKEN_TYPE_ACCESS)
        refresh = self.tokens.decode(pair.refresh_token, expected_type=TOKEN_TYPE_REFRESH)
        self.assertEqual(access["sub"], "u1")
        self.assertEqual(access["email"], "a@b.com")
        self.assertEqual(refresh["sub"], "u1")
        self.assertEqual(refresh["email"], "a@b.com")
        self.assertNotEqual(pair.access_token, pair.refresh_token)
        self.assertGreater(refresh["exp"], access["exp"])

    def test_recovery_token_carries_only_subject(self) -> None:
        payload = self.tokens.decode(
            self.tokens.issue_recovery("u1"), expected_type=TOKEN_TYPE_RECOVERY
        )
        self.assertEqual(payload["sub"], "u1")
        self.assertNotIn("email", payload)
        self.assertEqual(payload["exp"] - payload["iat"], 30 * 60)
        self.assertNotIn("pwd", payload)

    def test_recovery_token_carries_password_fingerprint(self) -> None:
        payload = self.tokens.decode(
            self.tokens.issue_recovery("u1", "0123456789abcdef"), expected_type=TOKEN_TYPE_RECOVERY
        )
        self.assertEqual(payload["pwd"], "0123456789abcdef")

    def test_type_mismatch_is_rejected(self) -> None:
        pair = self.tokens.issue_pair({"sub": "u1", "email": "a@b.com"})
        with self.assertRaises(InvalidTokenTypeError):
            self.tokens.decode(pair.refresh_token, expected_type=TOKEN_TYPE_ACCESS)
        # Subclass of the PyJWT base error so callers can catch one type.
        with self.assertRaises(jwt.PyJWTError):
            self.tokens.decode(pair.access_token, expected_type=TOKEN_TYPE_RECOVERY)

    def test_wrong_secret_is_rejected(self) -> None:
        other = TokenService("other-secret")
        with self.assertRaises(jwt.InvalidSignatureError):
            self.tokens.decode(other.sign({"sub": "u1"}))

    def test_expired_token_is_rejected(self) -> None:
        token = self.tokens.sign({"sub": "u1"}, expires_in=timedelta(seconds=-1))
        with self.assertRaises(jwt.ExpiredSignatureError):
            self.tokens.decode(token)


if __name__ == "__main__":
    unittest.main()
