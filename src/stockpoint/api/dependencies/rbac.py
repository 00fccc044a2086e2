"""Authorization dependencies - role-based access control.

These read the context set by ``get_current_user`` and must be declared
after it. A route that checks permissions without authenticating first is
a wiring bug and fails with a non-operational 500.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request

from src.stockpoint.api.context import AuthContext, get_auth_context
from src.stockpoint.core.exceptions import ApiError
from src.stockpoint.core.logging import get_logger

logger = get_logger(__name__)

AUTH_CONTEXT_MISSING = "User authentication context missing"


def _require_context(request: Request, check: str) -> AuthContext:
    context = get_auth_context(request)
    if context is None:
        logger.error(
            "Authorization check ran without authentication",
            check=check,
            path=request.url.path,
        )
        raise ApiError.internal(AUTH_CONTEXT_MISSING)
    return context


def require_permissions(*required: str) -> Callable[[Request], Awaitable[AuthContext]]:
    """Pass only if the caller holds every listed permission."""
    required_keys = frozenset(required)

    async def check_permissions(request: Request) -> AuthContext:
        context = _require_context(request, "permissions")
        missing = sorted(required_keys - context.permissions)
        if missing:
            logger.warning(
                "Permission denied",
                user_id=str(context.user_id),
                tenant_id=str(context.tenant_id),
                missing_permissions=missing,
                path=request.url.path,
            )
            raise ApiError.forbidden("Insufficient permissions")

        logger.debug("Permission granted", required_permissions=sorted(required_keys))
        return context

    return check_permissions


def require_any_role(*roles: str) -> Callable[[Request], Awaitable[AuthContext]]:
    """Pass if the caller holds at least one of the listed roles."""
    accepted = frozenset(roles)

    async def check_role(request: Request) -> AuthContext:
        context = _require_context(request, "roles")
        if accepted.isdisjoint(context.role_names):
            logger.warning(
                "Role denied",
                user_id=str(context.user_id),
                tenant_id=str(context.tenant_id),
                required_roles=sorted(accepted),
                user_roles=list(context.role_names),
                path=request.url.path,
            )
            raise ApiError.forbidden("Insufficient role")

        logger.debug("Role granted", required_roles=sorted(accepted))
        return context

    return check_role
