"""Repository for User entity."""

from uuid import UUID

from sqlalchemy.orm import selectinload
from sqlmodel import select

from src.stockpoint.models import Role, User
from src.stockpoint.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    async def get_by_email(self, email: str, tenant_id: UUID | None = None) -> list[User]:
        """Get users with this email, optionally within one tenant.

        Emails are unique per tenant only, so without a tenant this can
        return several users.
        """
        query = select(User).where(User.email == email.lower())
        if tenant_id is not None:
            query = query.where(User.tenant_id == tenant_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_active_with_access(self, user_id: UUID, tenant_id: UUID) -> User | None:
        """Get an active user of a tenant with roles, permissions and locations loaded."""
        result = await self.session.execute(
            select(User)
            .where(
                User.id == user_id,
                User.tenant_id == tenant_id,
                User.is_active == True,  # noqa: E712
            )
            .options(
                selectinload(User.roles).selectinload(Role.permissions),  # type: ignore[arg-type]
                selectinload(User.locations),  # type: ignore[arg-type]
            )
        )
        return result.scalar_one_or_none()
