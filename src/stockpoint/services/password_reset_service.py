"""Password reset service - forgot password and reset password flows."""

from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from src.stockpoint.core.config import get_settings
from src.stockpoint.core.exceptions import ApiError
from src.stockpoint.core.logging import get_logger
from src.stockpoint.core.notifications import send_password_reset_email
from src.stockpoint.core.security import (
    build_composite_token,
    compare_token,
    generate_secure_token,
    hash_password,
    hash_token,
    split_composite_token,
)
from src.stockpoint.models import PasswordResetToken, User, utc_now
from src.stockpoint.repositories import PasswordResetTokenRepository, UserRepository
from src.stockpoint.services.refresh_token_service import RefreshTokenService

logger = get_logger(__name__)

INVALID_RESET_TOKEN = "Invalid or expired password reset token"


class PasswordResetService:
    """Issues single-use reset tokens and applies password resets.

    Reset tokens share the ``<record id>.<secret>`` composite format of
    refresh tokens. A user has at most one unused reset token.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        reset_repo: PasswordResetTokenRepository,
        refresh_tokens: RefreshTokenService,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.reset_repo = reset_repo
        self.refresh_tokens = refresh_tokens
        self.session = session

    async def forgot_password(self, email: str, tenant_id: UUID | None = None) -> int:
        """Send reset links to the active users registered with this email.

        Callers must answer with the same generic message whatever happens
        here. Returns the number of reset tokens issued.
        """
        users = [u for u in await self.user_repo.get_by_email(email, tenant_id) if u.is_active]
        if not users:
            logger.info("Forgot password: no active user for email")
            return 0

        for user in users:
            token = await self.create_reset_token(user)
            sent = await run_in_threadpool(send_password_reset_email, user.email, token, user.first_name)
            if not sent:
                logger.error("Password reset email failed to send", user_id=str(user.id))
        return len(users)

    async def create_reset_token(self, user: User) -> str:
        """Replace the user's unused reset tokens with a fresh one."""
        settings = get_settings()
        secret = generate_secure_token()
        record = PasswordResetToken(
            user_id=user.id,
            token_hash=hash_token(secret),
            expires_at=utc_now() + timedelta(minutes=settings.password_reset_expire_minutes),
        )
        try:
            await self.reset_repo.delete_unused_for_user(user.id)
            self.reset_repo.add(record)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Password reset token issued", user_id=str(user.id), tenant_id=str(user.tenant_id))
        return build_composite_token(record.id, secret)

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using a reset token.

        Updates the hash, consumes the token and revokes every refresh token
        of the user in one transaction.

        Raises:
            ApiError: 400 if the token is malformed, unknown, used or expired.
        """
        record = await self._get_valid_token(token)

        user = await self.user_repo.get_by_id(record.user_id)
        if user is None or not user.is_active:
            logger.error("Password reset for missing or inactive user", user_id=str(record.user_id))
            try:
                await self.reset_repo.mark_used_if_unused(record.id)
                await self.session.commit()
            except Exception:
                await self.session.rollback()
                raise
            raise ApiError.bad_request(INVALID_RESET_TOKEN)

        try:
            if not await self.reset_repo.mark_used_if_unused(record.id):
                await self.session.rollback()
                logger.warning("Password reset rejected", reason="already_used")
                raise ApiError.bad_request(INVALID_RESET_TOKEN)
            user.hashed_password = hash_password(new_password)
            user.updated_at = utc_now()
            self.session.add(user)
        except ApiError:
            raise
        except Exception:
            await self.session.rollback()
            raise

        # Commits the password change and token consumption together
        revoked = await self.refresh_tokens.revoke_all_for_user(user.id)
        logger.info(
            "Password reset successful",
            user_id=str(user.id),
            tenant_id=str(user.tenant_id),
            sessions_revoked=revoked,
        )

    async def _get_valid_token(self, token: str) -> PasswordResetToken:
        parts = split_composite_token(token)
        if parts is None:
            logger.warning("Password reset rejected", reason="invalid_format")
            raise ApiError.bad_request(INVALID_RESET_TOKEN)
        raw_id, secret = parts
        try:
            record_id = UUID(raw_id)
        except ValueError:
            logger.warning("Password reset rejected", reason="invalid_format")
            raise ApiError.bad_request(INVALID_RESET_TOKEN) from None

        record = await self.reset_repo.get_by_id(record_id)
        if record is None or not compare_token(secret, record.token_hash):
            logger.warning("Password reset rejected", reason="not_found")
            raise ApiError.bad_request(INVALID_RESET_TOKEN)
        if record.used_at is not None:
            logger.warning("Password reset rejected", reason="already_used")
            raise ApiError.bad_request(INVALID_RESET_TOKEN)
        if record.is_expired():
            logger.warning("Password reset rejected", reason="expired")
            raise ApiError.bad_request(INVALID_RESET_TOKEN)
        return record
