"""Refresh token store and rotator.

Clients hold ``<record id>.<secret>`` composite tokens. The record id gives a
primary key lookup; only the SHA-256 hash of the secret is stored.

Lifecycle: ACTIVE -> REVOKED or ACTIVE -> EXPIRED, both terminal.
"""

from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.stockpoint.core.cache import TokenRevocationCache
from src.stockpoint.core.config import get_settings
from src.stockpoint.core.exceptions import ApiError
from src.stockpoint.core.logging import get_logger
from src.stockpoint.core.security import (
    build_composite_token,
    compare_token,
    create_access_token,
    generate_secure_token,
    hash_token,
    split_composite_token,
)
from src.stockpoint.models import RefreshToken, User, utc_now
from src.stockpoint.repositories import RefreshTokenRepository, UserRepository

logger = get_logger(__name__)

REFRESH_TOKEN_BYTES = 64
INVALID_REFRESH_TOKEN = "Refresh token not found or invalid"


class RefreshTokenService:
    """Issues, validates, rotates and revokes refresh tokens.

    The database is authoritative. Redis only short-circuits lookups of
    records already known to be revoked.
    """

    def __init__(
        self,
        token_repo: RefreshTokenRepository,
        user_repo: UserRepository,
        session: AsyncSession,
        cache: TokenRevocationCache,
    ):
        self.token_repo = token_repo
        self.user_repo = user_repo
        self.session = session
        self.cache = cache

    async def issue(
        self,
        user: User,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> str:
        """Persist a new refresh token for the user and return its composite form."""
        settings = get_settings()
        secret = generate_secure_token(REFRESH_TOKEN_BYTES)
        record = RefreshToken(
            user_id=user.id,
            token_hash=hash_token(secret),
            expires_at=utc_now() + timedelta(days=settings.refresh_token_expire_days),
            ip_address=ip_address,
            user_agent=user_agent[:512] if user_agent else None,
        )
        try:
            self.token_repo.add(record)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return build_composite_token(record.id, secret)

    async def validate(self, composite: str) -> RefreshToken:
        """Return the active record matching the composite token.

        Every rejection is logged with its reason; callers only ever see the
        same 401 message.
        """
        parts = split_composite_token(composite)
        if parts is None:
            logger.warning("Refresh token rejected", reason="invalid_format")
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN)

        raw_id, secret = parts
        try:
            record_id = UUID(raw_id)
        except ValueError:
            logger.warning("Refresh token rejected", reason="invalid_format")
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN) from None

        if await self.cache.is_revoked(record_id):
            logger.warning("Refresh token rejected", reason="revoked", record_id=str(record_id))
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN)

        record = await self.token_repo.get_by_id(record_id)
        if record is None:
            logger.warning("Refresh token rejected", reason="not_found", record_id=str(record_id))
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN)
        if not compare_token(secret, record.token_hash):
            logger.warning("Refresh token rejected", reason="hash_mismatch", record_id=str(record_id))
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN)
        if record.is_revoked:
            logger.warning(
                "Refresh token rejected",
                reason="revoked",
                record_id=str(record_id),
                user_id=str(record.user_id),
            )
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN)
        if record.is_expired():
            logger.warning("Refresh token rejected", reason="expired", record_id=str(record_id))
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN)

        return record

    async def rotate(
        self,
        composite: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[str, str]:
        """Exchange a refresh token for a new refresh token and access token.

        The old record is revoked and committed before anything is issued. Of
        several concurrent rotations of the same token exactly one succeeds.
        A failure after that commit leaves the old token revoked.

        Returns:
            Tuple of (new composite refresh token, new access token)
        """
        record = await self.validate(composite)

        try:
            changed = await self.token_repo.revoke_if_active(record.id)
            if changed:
                await self.session.commit()
            else:
                await self.session.rollback()
        except Exception:
            await self.session.rollback()
            raise

        if not changed:
            logger.warning(
                "Refresh token rejected",
                reason="concurrent_rotation",
                record_id=str(record.id),
                user_id=str(record.user_id),
            )
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN)

        await self._cache_revocation(record.id)

        user = await self.user_repo.get_by_id(record.user_id)
        if user is None or not user.is_active:
            logger.warning("Refresh token rejected", reason="user_inactive", user_id=str(record.user_id))
            raise ApiError.unauthorized(INVALID_REFRESH_TOKEN)

        access_token = create_access_token(user.id, user.tenant_id)
        new_composite = await self.issue(user, ip_address, user_agent)

        logger.info("Auth tokens refreshed", user_id=str(user.id), tenant_id=str(user.tenant_id))
        return new_composite, access_token

    async def revoke(self, composite: str) -> bool:
        """Revoke a single token (logout).

        Never raises for token state. Returns whether a token was revoked.
        """
        try:
            record = await self.validate(composite)
        except ApiError:
            logger.warning("Logout with invalid, expired or revoked refresh token")
            return False

        try:
            changed = await self.token_repo.revoke_if_active(record.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if not changed:
            return False

        await self._cache_revocation(record.id)
        logger.info("Refresh token revoked", user_id=str(record.user_id))
        return True

    async def revoke_all_for_user(self, user_id: UUID) -> int:
        """Revoke every active token of the user.

        Commits the session, including changes the caller staged on it.
        Returns the number of tokens revoked.
        """
        try:
            token_ids = await self.token_repo.get_active_ids_for_user(user_id)
            count = await self.token_repo.revoke_all_for_user(user_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if token_ids:
            await self.cache.revoke_many(token_ids, get_settings().refresh_token_ttl_seconds)
        logger.info("Refresh tokens revoked for user", user_id=str(user_id), count=count)
        return count

    async def cleanup_expired(self, retention_days: int | None = None) -> int:
        """Delete long-dead token rows. Returns number deleted.

        Defaults to ``TOKEN_CLEANUP_RETENTION_DAYS``.
        """
        if retention_days is None:
            retention_days = get_settings().token_cleanup_retention_days
        try:
            deleted = await self.token_repo.cleanup_expired(retention_days)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Expired refresh tokens cleaned up", deleted=deleted, retention_days=retention_days
        )
        return deleted

    async def _cache_revocation(self, record_id: UUID) -> None:
        await self.cache.revoke(record_id, get_settings().refresh_token_ttl_seconds)
