from src.stockpoint.services.auth_service import AuthService
from src.stockpoint.services.password_reset_service import PasswordResetService
from src.stockpoint.services.permission_resolver import ResolvedAccess, resolve_access
from src.stockpoint.services.refresh_token_service import RefreshTokenService
from src.stockpoint.services.seed_service import SeedService

__all__ = [
    "AuthService",
    "PasswordResetService",
    "RefreshTokenService",
    "ResolvedAccess",
    "SeedService",
    "resolve_access",
]
