from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, ValidationError
from typing import Optional
import sys
from functools import lru_cache
import structlog

logger = structlog.get_logger()


class Settings(BaseSettings):
    """
    Messaging Service Configuration

    Values are read from environment variables (or a local ``.env`` file).
    SECRET_KEY has no default; the service refuses to start without it.
    """

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
        validate_assignment=True,
    )

    # Application settings
    APP_NAME: str = "Messaging Service"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # API settings
    API_PREFIX: str = "/api"

    # Token settings - SECRET_KEY is REQUIRED
    SECRET_KEY: str = Field(..., min_length=32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, ge=1, le=60 * 24 * 7)
    # Extra lifetime given to revocation markers beyond the token's own expiry
    TOKEN_REVOCATION_GRACE_SECONDS: int = Field(default=60, ge=0, le=3600)

    # Input constraints
    PASSWORD_MIN_LENGTH: int = Field(default=6, ge=1, le=128)
    NAME_MAX_LENGTH: int = 255
    EMAIL_MAX_LENGTH: int = 255

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./messaging.db"
    DATABASE_POOL_SIZE: int = Field(default=10, ge=1, le=200)
    DATABASE_MAX_OVERFLOW: int = Field(default=20, ge=0, le=200)
    DATABASE_POOL_TIMEOUT: int = Field(default=30, ge=1, le=120)
    DATABASE_POOL_RECYCLE: int = Field(default=1800, ge=60, le=7200)
    AUTO_CREATE_TABLES: bool = True

    # Redis - holds the token revocation set
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_PASSWORD: Optional[str] = None
    REDIS_POOL_SIZE: int = Field(default=20, ge=1, le=200)
    REDIS_KEY_PREFIX: str = "messaging:"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Reject obviously weak signing keys"""
        bad_values = ["your-secret-key", "change-me", "change_me", "12345"]
        if any(bad in v.lower() for bad in bad_values):
            raise ValueError("SECRET_KEY contains weak or default values")
        return v

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_envs = ["development", "staging", "production", "test"]
        if v not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of: {valid_envs}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be a standard logging level name")
        return level

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


def validate_required_settings(settings: Settings) -> None:
    """
    Validate environment-specific requirements.
    Fail fast if critical settings are inconsistent.
    """
    errors = []

    if settings.ENVIRONMENT == "production":
        if settings.DEBUG:
            errors.append("DEBUG must be False in production")

        if "localhost" in settings.DATABASE_URL.lower() or settings.is_sqlite:
            errors.append("DATABASE_URL must point to a managed database in production")

        if settings.AUTO_CREATE_TABLES:
            errors.append("AUTO_CREATE_TABLES must be disabled in production; run migrations instead")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        logger.error(error_msg)
        raise ValueError(error_msg)

    logger.info(
        "Configuration validated successfully",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        token_ttl_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Exits if required environment variables are missing.
    """
    try:
        settings = Settings()
        validate_required_settings(settings)
        return settings
    except ValidationError as e:
        logger.error("Failed to load settings", errors=e.errors())
        print("\nCONFIGURATION ERROR")
        print("Required environment variables are missing or invalid:")
        for error in e.errors():
            field = error.get("loc", ["unknown"])[0]
            msg = error.get("msg", "Invalid value")
            print(f"  - {field}: {msg}")
        print("Please check your environment variables and .env file\n")
        sys.exit(1)
    except ValueError as e:
        logger.error("Invalid configuration", error=str(e))
        sys.exit(1)


# Initialize settings on module import
settings = get_settings()
