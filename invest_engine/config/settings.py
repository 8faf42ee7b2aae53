"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SECONDS_PER_DAY = 86400


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (for Dramatiq)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/invest_engine.log"
    health_check_port: int = Field(
        default=8080, ge=1, le=65535, description="Health check HTTP server port"
    )

    # Profit distribution
    distribution_interval_minutes: int = Field(
        default=60, ge=1, description="How often the distribution batch is triggered"
    )
    maturity_interval_seconds: int = Field(
        default=30 * SECONDS_PER_DAY,
        ge=1,
        description="Minimum time between two distributions of one investment",
    )
    distribution_max_attempts: int = Field(
        default=3, ge=1, le=10, description="Batch attempts before giving up"
    )
    distribution_retry_delay_seconds: float = Field(
        default=5.0, ge=0, description="Fixed delay between batch attempts"
    )
    emergency_stop_distribution: bool = Field(
        default=False,
        description="Emergency stop for all profit distributions",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            # DEBUG must be False in production
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )

            # Short maturity intervals are a development convenience only
            if self.maturity_interval_seconds < SECONDS_PER_DAY:
                raise ValueError(
                    'MATURITY_INTERVAL_SECONDS must be at least one day in '
                    f'production, got {self.maturity_interval_seconds}.'
                )

        if self.emergency_stop_distribution:
            logger.warning(
                'EMERGENCY_STOP_DISTRIBUTION is enabled. '
                'Profit distribution batches will be skipped.'
            )

        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql://', 'postgresql+asyncpg://', 'sqlite+aiosqlite://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql://, '
                'postgresql+asyncpg:// or sqlite+aiosqlite://'
            )
        return v

    @property
    def async_database_url(self) -> str:
        """Database URL with an async driver."""
        if self.database_url.startswith('postgresql://'):
            return self.database_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return self.database_url

    @property
    def redis_url(self) -> str:
        """Redis connection URL."""
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"


# Global settings instance
settings = Settings()
