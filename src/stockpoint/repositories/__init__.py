"""Repository layer - data access abstraction."""

from src.stockpoint.repositories.base import BaseRepository
from src.stockpoint.repositories.password_reset import PasswordResetTokenRepository
from src.stockpoint.repositories.rbac import PermissionRepository, RoleRepository
from src.stockpoint.repositories.tenant import TenantRepository
from src.stockpoint.repositories.token import RefreshTokenRepository
from src.stockpoint.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PasswordResetTokenRepository",
    "PermissionRepository",
    "RefreshTokenRepository",
    "RoleRepository",
    "TenantRepository",
    "UserRepository",
]
