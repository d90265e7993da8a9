"""Unit tests for Settings validation and TokenConfig construction."""

import unittest
from datetime import timedelta

from pydantic import SecretStr, ValidationError

from mybank.core.config import Settings
from mybank.core.security import TokenConfig


class TestSettingsValidation(unittest.TestCase):
    def test_rejects_non_postgres_url(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(DATABASE_URL="mysql://root@localhost/mybank")

    def test_accepts_sqlite_url(self) -> None:
        self.assertEqual(Settings(DATABASE_URL=" sqlite:///./mybank.db ").DATABASE_URL, "sqlite:///./mybank.db")

    def test_ssl_mode_normalized(self) -> None:
        self.assertEqual(Settings(DB_SSL_MODE="REQUIRE").DB_SSL_MODE, "require")
        with self.assertRaises(ValidationError):
            Settings(DB_SSL_MODE="sometimes")

    def test_bounds(self) -> None:
        for field, value in (
            ("SESSION_TTL_MINUTES", 0),
            ("BCRYPT_ROUNDS", 3),
            ("DB_POOL_SIZE", 0),
            ("DB_POOL_TIMEOUT_SEC", 0),
            ("JWT_SECRET", "   "),
        ):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    Settings(**{field: value})

    def test_api_prefix_trailing_slash(self) -> None:
        self.assertEqual(Settings(API_PREFIX="/api/").API_PREFIX, "/api")


class TestTokenConfig(unittest.TestCase):
    def test_from_settings(self) -> None:
        settings = Settings(JWT_SECRET="s3cret", SESSION_TTL_MINUTES=30)
        config = TokenConfig.from_settings(settings)
        self.assertEqual(config.secret.get_secret_value(), "s3cret")
        self.assertEqual(config.ttl, timedelta(minutes=30))
        self.assertNotIn("s3cret", repr(config))

    def test_is_immutable(self) -> None:
        config = TokenConfig(secret=SecretStr("s3cret"))
        with self.assertRaises(ValidationError):
            config.algorithm = "none"


if __name__ == "__main__":
    unittest.main()
