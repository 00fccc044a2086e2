"""Rate limiting configuration with optional Redis backend.

Uses Redis for distributed rate limiting when REDIS_URL is configured.
Falls back to in-memory storage (per-process) otherwise.

Two layers:
1. Default limit applied to every route (``RATE_LIMIT_DEFAULT``)
2. Stricter per-route limit on ``/auth/*`` (``RATE_LIMIT_AUTH``)
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.stockpoint.core.config import get_settings
from src.stockpoint.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Rate limit key from client IP only.

    Never include unauthenticated, client-controlled headers in the key;
    rotating them would create unlimited buckets.
    """
    return get_remote_address(request) or "unknown"


def auth_rate_limit() -> str:
    """Limit string for authentication routes, read at request time."""
    return get_settings().rate_limit_auth


def create_limiter() -> Limiter:
    """Create rate limiter with appropriate storage backend.

    Disabled in testing environment.
    """
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    default_limits = [settings.rate_limit_default]
    # slowapi uses sync Redis internally, so the plain redis:// URL is used
    if settings.redis_url:
        logger.info("Rate limiter using Redis backend")
        return Limiter(
            key_func=get_rate_limit_key,
            default_limits=default_limits,
            storage_uri=settings.redis_url,
        )
    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key, default_limits=default_limits)


# Reads settings at import time; reconfiguration requires a restart
limiter = create_limiter()
