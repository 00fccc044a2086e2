"""Tenant role listing endpoint."""

from fastapi import APIRouter, Depends

from src.stockpoint.api.dependencies import RoleRepo, TenantId, require_permissions
from src.stockpoint.schemas.rbac import RoleRead

router = APIRouter(prefix="/roles", tags=["rbac"])


@router.get(
    "",
    response_model=list[RoleRead],
    dependencies=[Depends(require_permissions("role:read"))],
)
async def list_roles(tenant_id: TenantId, role_repo: RoleRepo) -> list[RoleRead]:
    """Roles of the caller's tenant with their permission keys."""
    roles = await role_repo.list_for_tenant(tenant_id)
    return [
        RoleRead(
            id=role.id,
            name=role.name,
            description=role.description,
            is_system_role=role.is_system_role,
            grants_all_locations=role.grants_all_locations,
            permissions=sorted(p.permission_key for p in role.permissions),
        )
        for role in roles
    ]
