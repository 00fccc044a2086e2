from fastapi import APIRouter, Depends

from src.stockpoint.api.dependencies import ensure_tenant_context, get_current_user
from src.stockpoint.api.v1 import auth, permissions, roles, users

# Authentication, then tenant guard, then route-level RBAC, then the handler
TENANT_SCOPED = [Depends(get_current_user), Depends(ensure_tenant_context)]

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router, dependencies=TENANT_SCOPED)
api_router.include_router(permissions.router, dependencies=TENANT_SCOPED)
api_router.include_router(roles.router, dependencies=TENANT_SCOPED)
