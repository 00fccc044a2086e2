"""Permission catalog endpoint."""

from fastapi import APIRouter, Depends

from src.stockpoint.api.dependencies import PermissionRepo, require_permissions
from src.stockpoint.schemas.rbac import PermissionRead

router = APIRouter(prefix="/permissions", tags=["rbac"])


@router.get(
    "",
    response_model=list[PermissionRead],
    dependencies=[Depends(require_permissions("role:read"))],
)
async def list_permissions(permission_repo: PermissionRepo) -> list[PermissionRead]:
    """Every permission that can be assigned to a role."""
    permissions = await permission_repo.list_all()
    return [PermissionRead.model_validate(p) for p in permissions]
