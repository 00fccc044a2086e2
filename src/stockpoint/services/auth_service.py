"""Authentication service - credential login and logout."""

from uuid import UUID

from src.stockpoint.core.exceptions import ApiError
from src.stockpoint.core.logging import get_logger
from src.stockpoint.core.security import (
    create_access_token,
    get_dummy_password_hash,
    verify_password,
)
from src.stockpoint.repositories import UserRepository
from src.stockpoint.schemas.auth import LoginResponse
from src.stockpoint.schemas.user import UserRead
from src.stockpoint.services.refresh_token_service import RefreshTokenService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Incorrect email or password"


class AuthService:
    """Credential checks and session start/end.

    The same email may belong to users of several tenants. Without a
    ``tenant_id`` such a login is ambiguous and rejected like bad credentials.
    """

    def __init__(self, user_repo: UserRepository, refresh_tokens: RefreshTokenService):
        self.user_repo = user_repo
        self.refresh_tokens = refresh_tokens

    async def login(
        self,
        email: str,
        password: str,
        tenant_id: UUID | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> tuple[LoginResponse, str]:
        """Authenticate and start a session.

        Returns:
            Tuple of (response body, composite refresh token for the cookie)

        Raises:
            ApiError: 401 for unknown email, wrong password, inactive user or
                ambiguous email. The message is identical in every case.
        """
        candidates = await self.user_repo.get_by_email(email, tenant_id)
        user = candidates[0] if len(candidates) == 1 else None

        # Always verify a hash so response time does not reveal whether the email exists
        password_hash = user.hashed_password if user else get_dummy_password_hash()
        password_valid = verify_password(password, password_hash)

        if user is None:
            reason = "ambiguous_email" if candidates else "user_not_found"
            logger.warning("Login failed", reason=reason, ip_address=ip_address)
            raise ApiError.unauthorized(INVALID_CREDENTIALS)
        if not password_valid:
            logger.warning("Login failed", reason="incorrect_password", user_id=str(user.id))
            raise ApiError.unauthorized(INVALID_CREDENTIALS)
        if not user.is_active:
            logger.warning("Login failed", reason="user_inactive", user_id=str(user.id))
            raise ApiError.unauthorized(INVALID_CREDENTIALS)

        access_token = create_access_token(user.id, user.tenant_id)
        refresh_token = await self.refresh_tokens.issue(user, ip_address, user_agent)

        logger.info(
            "Login successful",
            user_id=str(user.id),
            tenant_id=str(user.tenant_id),
            ip_address=ip_address,
        )
        response = LoginResponse(user=UserRead.model_validate(user), access_token=access_token)
        return response, refresh_token

    async def logout(self, refresh_token: str | None) -> bool:
        """End a session. Never fails on token state."""
        if not refresh_token:
            logger.info("Logout without refresh token cookie")
            return False
        return await self.refresh_tokens.revoke(refresh_token)
