from functools import lru_cache
from typing import Any

import structlog
from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Plain structlog logger: settings load before setup_logging() runs
logger = structlog.get_logger(__name__)

DEFAULT_ACCESS_TOKEN_EXPIRE_SECONDS = 15 * 60
DEFAULT_REFRESH_TOKEN_EXPIRE_DAYS = 7
DEFAULT_PASSWORD_RESET_EXPIRE_MINUTES = 60


def _positive_int_or_default(value: Any, default: int, setting: str) -> int:
    """Coerce a lifetime setting to a positive int, falling back to default.

    Malformed lifetimes must not prevent the API from starting.
    """
    if value is None or value == "":
        return default
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        parsed = 0
    if parsed <= 0:
        logger.warning(
            "Invalid token lifetime setting, using default",
            setting=setting,
            value=str(value),
            default=default,
        )
        return default
    return parsed


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Stockpoint API"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_seconds: int = DEFAULT_ACCESS_TOKEN_EXPIRE_SECONDS
    refresh_token_expire_days: int = DEFAULT_REFRESH_TOKEN_EXPIRE_DAYS
    password_reset_expire_minutes: int = DEFAULT_PASSWORD_RESET_EXPIRE_MINUTES
    refresh_token_cookie_name: str = "refreshToken"
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Token cleanup
    token_cleanup_retention_days: int = 30  # Delete tokens dead for longer than this

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Email (Resend)
    resend_api_key: str | None = None  # If not set, emails are logged but not sent
    email_from: str = "noreply@example.com"
    email_send_timeout_seconds: int = 10
    app_url: str = "http://localhost:3000"  # Frontend URL for password reset links

    # Redis (optional - app works without it)
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10

    # Rate limiting (slowapi limit strings, per client IP)
    rate_limit_default: str = "100/15minutes"
    rate_limit_auth: str = "10/15minutes"

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator(
        "access_token_expire_seconds",
        "refresh_token_expire_days",
        "password_reset_expire_minutes",
        mode="before",
    )
    @classmethod
    def fallback_on_malformed_lifetime(cls, v: Any, info: ValidationInfo) -> int:
        defaults = {
            "access_token_expire_seconds": DEFAULT_ACCESS_TOKEN_EXPIRE_SECONDS,
            "refresh_token_expire_days": DEFAULT_REFRESH_TOKEN_EXPIRE_DAYS,
            "password_reset_expire_minutes": DEFAULT_PASSWORD_RESET_EXPIRE_MINUTES,
        }
        return _positive_int_or_default(v, defaults[info.field_name], info.field_name)

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcard origins: the refresh cookie requires credentials."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def refresh_token_ttl_seconds(self) -> int:
        return self.refresh_token_expire_days * 86400


@lru_cache
def get_settings() -> Settings:
    return Settings()
