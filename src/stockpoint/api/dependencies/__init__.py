"""FastAPI dependency injection definitions."""

from src.stockpoint.api.dependencies.auth import CurrentUser, get_current_user
from src.stockpoint.api.dependencies.db import DBSession, get_db_session
from src.stockpoint.api.dependencies.rbac import require_any_role, require_permissions
from src.stockpoint.api.dependencies.repositories import (
    PasswordResetRepo,
    PermissionRepo,
    RoleRepo,
    TokenRepo,
    UserRepo,
    get_password_reset_repository,
    get_permission_repository,
    get_role_repository,
    get_token_repository,
    get_user_repository,
)
from src.stockpoint.api.dependencies.services import (
    AuthServiceDep,
    PasswordResetServiceDep,
    RefreshTokenServiceDep,
    RevocationCache,
    get_auth_service,
    get_password_reset_service,
    get_refresh_token_service,
    get_revocation_cache,
)
from src.stockpoint.api.dependencies.tenant import TenantId, ensure_tenant_context, get_tenant_id

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentUser",
    "get_current_user",
    # RBAC
    "require_any_role",
    "require_permissions",
    # Tenant
    "TenantId",
    "ensure_tenant_context",
    "get_tenant_id",
    # Repositories
    "PasswordResetRepo",
    "PermissionRepo",
    "RoleRepo",
    "TokenRepo",
    "UserRepo",
    "get_password_reset_repository",
    "get_permission_repository",
    "get_role_repository",
    "get_token_repository",
    "get_user_repository",
    # Services
    "AuthServiceDep",
    "PasswordResetServiceDep",
    "RefreshTokenServiceDep",
    "RevocationCache",
    "get_auth_service",
    "get_password_reset_service",
    "get_refresh_token_service",
    "get_revocation_cache",
]
