"""Model exports.

Import from here: `from src.stockpoint.models import User, Role`
"""

from src.stockpoint.models.auth import PasswordResetToken, RefreshToken
from src.stockpoint.models.base import utc_now
from src.stockpoint.models.location import Location, UserLocation
from src.stockpoint.models.rbac import Permission, Role, RolePermission, UserRole
from src.stockpoint.models.tenant import Tenant
from src.stockpoint.models.user import User

__all__ = [
    "Location",
    "PasswordResetToken",
    "Permission",
    "RefreshToken",
    "Role",
    "RolePermission",
    "Tenant",
    "User",
    "UserLocation",
    "UserRole",
    "utc_now",
]
