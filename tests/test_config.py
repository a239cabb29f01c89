"""Unit tests for core/config.py -- SECRET_KEY policy and defaults.

Covers:
- Missing SECRET_KEY is a startup failure (no fallback value)
- SECRET_KEY shorter than 32 chars is rejected
- Token lifetime defaults to 7 days
- bcrypt cost factor is bounded
"""

import pytest

from core.config import Settings, get_settings

_GOOD_KEY = "k" * 32


def test_missing_secret_key_is_rejected():
    with pytest.raises(ValueError, match="SECRET_KEY is required"):
        Settings(secret_key="")


def test_short_secret_key_is_rejected():
    with pytest.raises(ValueError, match="at least 32 characters"):
        Settings(secret_key="too-short")


def test_valid_secret_key_is_accepted():
    settings = Settings(secret_key=_GOOD_KEY)
    assert settings.secret_key == _GOOD_KEY


def test_token_lifetime_defaults_to_seven_days():
    assert Settings(secret_key=_GOOD_KEY).token_expire_seconds == 604800


def test_bcrypt_rounds_below_minimum_rejected():
    with pytest.raises(ValueError):
        Settings(secret_key=_GOOD_KEY, bcrypt_rounds=3)


def test_bcrypt_rounds_default_is_ten():
    assert Settings.model_fields["bcrypt_rounds"].default == 10


def test_get_settings_is_a_singleton():
    assert get_settings() is get_settings()
