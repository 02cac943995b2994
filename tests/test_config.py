"""Unit tests for app.core.config.Settings validation."""

import unittest

from pydantic import SecretStr, ValidationError

from app.core.config import Settings


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettingsDefaults(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        s = _settings()
        self.assertEqual(s.JWT_ALGORITHM, "HS256")
        self.assertEqual(s.RECOVERY_TOKEN_EXPIRE_MINUTES, 30)
        self.assertEqual(s.PASSWORD_RESET_PATH, "/alterar-senha")
        self.assertIsNone(s.MAIL_HOST)

    def test_mail_sender_falls_back_to_username(self) -> None:
        self.assertEqual(_settings(MAIL_USERNAME="bot@example.com").mail_sender, "bot@example.com")
        self.assertEqual(
            _settings(MAIL_USERNAME="bot@example.com", MAIL_FROM="noreply@example.com").mail_sender,
            "noreply@example.com",
        )

    def test_blank_mail_host_becomes_none(self) -> None:
        self.assertIsNone(_settings(MAIL_HOST="   ").MAIL_HOST)


class TestSettingsValidation(unittest.TestCase):
    def test_rejects_non_postgres_database_url(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(DATABASE_URL="sqlite:///accounts.db")

    def test_rejects_empty_jwt_secret(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_SECRET=SecretStr("  "))

    def test_rejects_refresh_shorter_than_access(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(JWT_ACCESS_EXPIRE_MINUTES=120, JWT_REFRESH_EXPIRE_MINUTES=60)

    def test_rejects_bad_app_url(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(APP_URL="ftp://example.com")

    def test_app_url_trailing_slash_is_stripped(self) -> None:
        self.assertEqual(_settings(APP_URL="https://app.example.com/").APP_URL, "https://app.example.com")

    def test_rejects_reset_path_without_slash(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(PASSWORD_RESET_PATH="reset")

    def test_log_level_is_upper_cased(self) -> None:
        self.assertEqual(_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            _settings(LOG_LEVEL="chatty")


if __name__ == "__main__":
    unittest.main()
