"""Tenant repository."""

from sqlmodel import select

from src.stockpoint.models import Tenant
from src.stockpoint.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    model = Tenant

    async def get_by_name(self, name: str) -> Tenant | None:
        """Oldest tenant with this name; names are not unique."""
        result = await self.session.execute(
            select(Tenant)
            .where(Tenant.name == name)
            .order_by(Tenant.created_at)  # type: ignore[arg-type]
            .limit(1)
        )
        return result.scalars().first()
