"""Authentication dependency - establishes the caller's identity."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, Request

from src.stockpoint.api.context import AuthContext
from src.stockpoint.api.dependencies.repositories import UserRepo
from src.stockpoint.core.config import get_settings
from src.stockpoint.core.exceptions import ApiError
from src.stockpoint.core.logging import bind_user_context, get_logger
from src.stockpoint.core.security import (
    InvalidTokenError,
    TokenExpiredError,
    decode_access_token,
)
from src.stockpoint.services.permission_resolver import resolve_access

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


async def get_current_user(
    request: Request,
    user_repo: UserRepo,
    authorization: Annotated[str | None, Header()] = None,
) -> AuthContext:
    """Validate the access token and load the caller's effective access.

    The user must exist in the token's tenant and be active; otherwise the
    request fails closed with 401. On success the context is attached to
    ``request.state.auth`` and the tenant to ``request.state.tenant_id``.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise ApiError.unauthorized("Authentication token required")

    try:
        payload = decode_access_token(authorization[len(BEARER_PREFIX) :])
    except TokenExpiredError:
        raise ApiError.unauthorized("Token expired") from None
    except InvalidTokenError as e:
        logger.debug("Access token rejected", error=str(e))
        raise ApiError.unauthorized("Invalid token") from None

    try:
        user_id = UUID(str(payload.get("sub")))
        tenant_id = UUID(str(payload.get("tenant_id")))
    except ValueError:
        raise ApiError.unauthorized("Invalid token") from None

    try:
        user = await user_repo.get_active_with_access(user_id, tenant_id)
        access = resolve_access(user) if user is not None else None
    except Exception as e:
        logger.error(
            "Authentication lookup failed",
            user_id=str(user_id),
            tenant_id=str(tenant_id),
            error=str(e),
            exc_info=e,
        )
        raise ApiError.unauthorized("Authentication failed") from None

    if user is None or access is None:
        logger.warning(
            "Authenticated user not found or inactive",
            user_id=str(user_id),
            tenant_id=str(tenant_id),
        )
        raise ApiError.unauthorized("User not found or inactive")

    context = AuthContext(
        user_id=user.id,
        tenant_id=user.tenant_id,
        email=user.email,
        access=access,
    )
    request.state.auth = context
    request.state.tenant_id = context.tenant_id
    bind_user_context(
        context.user_id,
        context.tenant_id,
        email=context.email,
        log_emails=get_settings().log_user_emails,
    )
    return context


CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
