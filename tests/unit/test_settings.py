"""
Tests for application settings validation.
"""

import pytest
from pydantic import ValidationError

from invest_engine.config.settings import Settings


def make_settings(**overrides):
    """Settings built only from explicit values."""
    values = {"database_url": "postgresql+asyncpg://u:p@localhost/db", "environment": "development"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestSettings:
    """Test Settings validators."""

    def test_defaults(self):
        """Distribution defaults: hourly trigger, 30-day maturity, 3 attempts, 5s delay."""
        settings = make_settings()
        assert settings.distribution_interval_minutes == 60
        assert settings.maturity_interval_seconds == 30 * 86400
        assert settings.distribution_max_attempts == 3
        assert settings.distribution_retry_delay_seconds == 5.0
        assert settings.emergency_stop_distribution is False

    def test_rejects_unsupported_database(self):
        """Only PostgreSQL and async SQLite URLs are accepted."""
        with pytest.raises(ValidationError):
            make_settings(database_url="mysql://u:p@localhost/db")

    def test_async_url_conversion(self):
        """Plain postgresql URLs get the asyncpg driver."""
        settings = make_settings(database_url="postgresql://u:p@localhost/db")
        assert settings.async_database_url == "postgresql+asyncpg://u:p@localhost/db"

    def test_production_rejects_debug(self):
        """DEBUG must be off in production."""
        with pytest.raises(ValidationError):
            make_settings(environment="production", debug=True)

    def test_production_rejects_short_maturity(self):
        """Minute-scale maturity is for development only."""
        with pytest.raises(ValidationError):
            make_settings(environment="production", maturity_interval_seconds=600)

    def test_development_allows_short_maturity(self):
        """Development may use a 10-minute maturity interval."""
        settings = make_settings(maturity_interval_seconds=600)
        assert settings.maturity_interval_seconds == 600

    def test_redis_url(self):
        """Redis URL includes the password when set."""
        settings = make_settings(redis_password="secret", redis_db=2)
        assert settings.redis_url == "redis://:secret@localhost:6379/2"
