"""Repository for RefreshToken entity."""

from datetime import timedelta
from uuid import UUID

from sqlalchemy import and_, delete, or_, update
from sqlmodel import select

from src.stockpoint.models import RefreshToken, utc_now
from src.stockpoint.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    model = RefreshToken

    async def revoke_if_active(self, token_id: UUID) -> int:
        """Revoke a token only if it is not revoked yet.

        Returns the number of rows changed (0 or 1). Concurrent callers race on
        this conditional update; exactly one of them sees 1.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == token_id)  # type: ignore[arg-type]
            .where(RefreshToken.revoked_at.is_(None))  # type: ignore[union-attr]
            .values(revoked_at=utc_now())
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def get_active_ids_for_user(self, user_id: UUID) -> list[UUID]:
        """IDs of all non-revoked, non-expired tokens of a user."""
        result = await self.session.execute(
            select(RefreshToken.id).where(
                RefreshToken.user_id == user_id,
                RefreshToken.revoked_at.is_(None),  # type: ignore[union-attr]
                RefreshToken.expires_at > utc_now(),
            )
        )
        return list(result.scalars().all())

    async def revoke_all_for_user(self, user_id: UUID) -> int:
        """Revoke all active refresh tokens of a user.

        Returns the number of tokens revoked.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id)  # type: ignore[arg-type]
            .where(RefreshToken.revoked_at.is_(None))  # type: ignore[union-attr]
            .values(revoked_at=utc_now())
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def cleanup_expired(self, retention_days: int) -> int:
        """Delete tokens expired or revoked more than retention_days ago.

        Returns:
            Number of tokens deleted
        """
        cutoff = utc_now() - timedelta(days=retention_days)
        stmt = delete(RefreshToken).where(
            or_(
                RefreshToken.expires_at < cutoff,  # type: ignore[arg-type]
                and_(
                    RefreshToken.revoked_at.is_not(None),  # type: ignore[union-attr]
                    RefreshToken.revoked_at < cutoff,  # type: ignore[operator]
                ),
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]
