from src.stockpoint.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshResponse,
    ResetPasswordRequest,
)
from src.stockpoint.schemas.rbac import PermissionRead, RoleRead
from src.stockpoint.schemas.user import CurrentUserRead, UserRead

__all__ = [
    # Auth
    "ForgotPasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RefreshResponse",
    "ResetPasswordRequest",
    # RBAC
    "PermissionRead",
    "RoleRead",
    # User
    "CurrentUserRead",
    "UserRead",
]
