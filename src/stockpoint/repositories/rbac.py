"""Repositories for the permission catalog and tenant roles."""

from uuid import UUID

from sqlalchemy.orm import selectinload
from sqlmodel import select

from src.stockpoint.models import Permission, Role
from src.stockpoint.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    model = Permission

    async def list_all(self) -> list[Permission]:
        result = await self.session.execute(select(Permission).order_by(Permission.permission_key))
        return list(result.scalars().all())


class RoleRepository(BaseRepository[Role]):
    model = Role

    async def list_for_tenant(self, tenant_id: UUID) -> list[Role]:
        """Roles of a tenant with their permissions loaded."""
        result = await self.session.execute(
            select(Role)
            .where(Role.tenant_id == tenant_id)
            .options(selectinload(Role.permissions))  # type: ignore[arg-type]
            .order_by(Role.name)
        )
        return list(result.scalars().all())

    async def get_by_name(self, tenant_id: UUID, name: str) -> Role | None:
        result = await self.session.execute(
            select(Role)
            .where(Role.tenant_id == tenant_id, Role.name == name)
            .options(selectinload(Role.permissions))  # type: ignore[arg-type]
        )
        return result.scalar_one_or_none()
