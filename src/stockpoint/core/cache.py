"""Refresh token revocation cache with Redis backend and graceful fallback.

Fast path for revocation checks. The database stays authoritative: a cache
miss or an unavailable Redis means "ask the database".
"""

from uuid import UUID

from redis.asyncio import Redis

from src.stockpoint.core.logging import get_logger

logger = get_logger(__name__)

PREFIX_REVOKED_REFRESH_TOKEN = "revoked_refresh_token"


def _key(record_id: UUID | str) -> str:
    return f"{PREFIX_REVOKED_REFRESH_TOKEN}:{record_id}"


class TokenRevocationCache:
    """Marks revoked refresh token records in Redis."""

    def __init__(self, redis: Redis | None):
        self.redis = redis

    async def revoke(self, record_id: UUID | str, ttl: int) -> bool:
        """Mark a record as revoked for ``ttl`` seconds.

        Returns:
            True if written to Redis, False if Redis is unavailable or failed.
        """
        if self.redis is None or ttl <= 0:
            return False
        try:
            await self.redis.setex(_key(record_id), ttl, "1")
        except Exception as e:
            logger.warning("Failed to cache token revocation", record_id=str(record_id), error=str(e))
            return False
        return True

    async def revoke_many(self, record_ids: list[UUID], ttl: int) -> int:
        """Bulk mark records as revoked. Returns how many were written."""
        if self.redis is None or not record_ids or ttl <= 0:
            return 0
        try:
            pipe = self.redis.pipeline()
            for record_id in record_ids:
                pipe.setex(_key(record_id), ttl, "1")
            await pipe.execute()
        except Exception as e:
            logger.warning("Failed to cache bulk token revocation", count=len(record_ids), error=str(e))
            return 0
        return len(record_ids)

    async def is_revoked(self, record_id: UUID | str) -> bool | None:
        """Check the cache for a revoked record.

        Returns:
            True: Record is known revoked
            False: Redis confirmed it is not cached as revoked
            None: Redis unavailable (caller must check database)
        """
        if self.redis is None:
            return None
        try:
            result = await self.redis.get(_key(record_id))
        except Exception as e:
            logger.warning("Revocation cache lookup failed", record_id=str(record_id), error=str(e))
            return None
        return result is not None
