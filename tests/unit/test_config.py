"""
Unit tests for configuration loading.
"""
import os

import pytest
from pydantic import ValidationError

from messaging_service.core.config import Settings, validate_required_settings

STRONG_KEY = "a-perfectly-reasonable-signing-key-for-tests"


@pytest.mark.unit
class TestSettings:

    def test_defaults(self):
        settings = Settings(SECRET_KEY=STRONG_KEY, _env_file=None)

        assert settings.API_PREFIX == "/api"
        assert settings.PASSWORD_MIN_LENGTH == 6
        assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 60

    @pytest.mark.parametrize("key", ["short", "please-change-me-before-deploying-this-app", "x" * 30 + "12345"])
    def test_weak_secret_key_rejected(self, key):
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY=key, _env_file=None)

    def test_suite_signing_key_is_accepted(self):
        settings = Settings(SECRET_KEY=os.environ["SECRET_KEY"], _env_file=None)

        assert settings.SECRET_KEY == os.environ["SECRET_KEY"]

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(SECRET_KEY=STRONG_KEY, ENVIRONMENT="qa", _env_file=None)

    def test_log_level_is_normalized(self):
        assert Settings(SECRET_KEY=STRONG_KEY, LOG_LEVEL="debug", _env_file=None).LOG_LEVEL == "DEBUG"

    def test_production_requires_real_database(self):
        settings = Settings(
            SECRET_KEY=STRONG_KEY,
            ENVIRONMENT="production",
            DATABASE_URL="sqlite+aiosqlite:///./prod.db",
            _env_file=None
        )

        with pytest.raises(ValueError, match="DATABASE_URL"):
            validate_required_settings(settings)
