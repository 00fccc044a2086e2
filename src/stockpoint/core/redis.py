"""Redis client with connection pooling and graceful fallback.

Redis is optional. If it is not configured or unreachable the client is None
and callers degrade to database-only behaviour.
"""

from redis.asyncio import ConnectionPool, Redis

from src.stockpoint.core.config import Settings
from src.stockpoint.core.logging import get_logger

logger = get_logger(__name__)


async def create_redis(settings: Settings) -> Redis | None:
    """Connect to Redis. Returns None if unavailable (graceful degradation)."""
    if not settings.redis_url:
        logger.info("Redis not configured (REDIS_URL not set)")
        return None

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=settings.redis_pool_size,
        decode_responses=True,  # Return strings instead of bytes
    )
    client = Redis(connection_pool=pool)
    try:
        await client.ping()  # type: ignore[misc]
    except Exception as e:
        logger.warning("Redis connection failed, falling back to non-Redis mode", error=str(e))
        await client.aclose()
        await pool.disconnect()
        return None

    logger.info("Redis connected successfully")
    return client


async def close_redis(client: Redis | None) -> None:
    """Close the Redis client and its pool. Call during shutdown."""
    if client is None:
        return
    await client.aclose()
    await client.connection_pool.disconnect()
    logger.info("Redis connection closed")
