"""Tests for settings validation."""

import unittest

from pydantic import ValidationError

from tests.helpers import make_settings


class TestSettingsValidation(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = make_settings()
        self.assertEqual(settings.JWT_ALGORITHM, "HS256")
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 60)
        self.assertEqual(settings.AVATAR_MAX_COUNT, 50)
        self.assertEqual(settings.AVATAR_MAX_DATA_URL_LENGTH, 10_000)
        self.assertEqual(settings.AVATAR_MAX_SOURCE_DIMENSION, 2500)
        self.assertEqual(settings.AVATAR_SIZE, 50)
        self.assertEqual(settings.API_PREFIX, "")

    def test_log_level_is_normalised(self) -> None:
        self.assertEqual(make_settings(LOG_LEVEL=" debug ").LOG_LEVEL, "DEBUG")

    def test_invalid_values_are_rejected(self) -> None:
        cases = [
            {"DATABASE_URL": "mysql://localhost/cms"},
            {"DATABASE_URL": "   "},
            {"LOG_LEVEL": "LOUD"},
            {"JWT_SECRET": "  "},
            {"JWT_EXPIRE_MINUTES": 0},
            {"BCRYPT_ROUNDS": 3},
            {"BCRYPT_ROUNDS": 17},
            {"AVATAR_MAX_COUNT": 0},
            {"APP_ENV": "staging"},
        ]
        for overrides in cases:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValidationError):
                    make_settings(**overrides)


if __name__ == "__main__":
    unittest.main()
