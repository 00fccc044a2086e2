"""Repository for PasswordResetToken entity."""

from uuid import UUID

from sqlalchemy import delete, update

from src.stockpoint.models import PasswordResetToken, utc_now
from src.stockpoint.repositories.base import BaseRepository


class PasswordResetTokenRepository(BaseRepository[PasswordResetToken]):
    model = PasswordResetToken

    async def delete_unused_for_user(self, user_id: UUID) -> int:
        """Delete all unused reset tokens of a user (single active token)."""
        stmt = delete(PasswordResetToken).where(
            PasswordResetToken.user_id == user_id,  # type: ignore[arg-type]
            PasswordResetToken.used_at.is_(None),  # type: ignore[union-attr]
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def mark_used_if_unused(self, token_id: UUID) -> int:
        """Set ``used_at`` once. Returns rows changed (0 if already used)."""
        stmt = (
            update(PasswordResetToken)
            .where(PasswordResetToken.id == token_id)  # type: ignore[arg-type]
            .where(PasswordResetToken.used_at.is_(None))  # type: ignore[union-attr]
            .values(used_at=utc_now())
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0  # type: ignore[attr-defined]
