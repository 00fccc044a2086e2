"""Current user endpoint."""

from fastapi import APIRouter

from src.stockpoint.api.dependencies import CurrentUser
from src.stockpoint.schemas.user import CurrentUserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=CurrentUserRead)
async def get_me(current_user: CurrentUser) -> CurrentUserRead:
    """Identity, roles, effective permissions and location scope of the caller."""
    return CurrentUserRead(
        user_id=current_user.user_id,
        tenant_id=current_user.tenant_id,
        email=current_user.email,
        roles=list(current_user.role_names),
        permissions=sorted(current_user.permissions),
        allowed_location_ids=list(current_user.allowed_location_ids),
    )
