"""Tenant context guard.

Tenant scope comes only from the verified access token, set on the request
by authentication. Nothing here reads client-supplied tenant headers.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request

from src.stockpoint.core.exceptions import ApiError
from src.stockpoint.core.logging import get_logger

logger = get_logger(__name__)

TENANT_CONTEXT_MISSING = "Tenant context could not be determined"


def get_tenant_id(request: Request) -> UUID:
    """Tenant of the authenticated caller. Raises a 500 if never established."""
    tenant_id = getattr(request.state, "tenant_id", None)
    if tenant_id is None:
        logger.error("Tenant context missing", path=request.url.path)
        raise ApiError.internal(TENANT_CONTEXT_MISSING)
    return tenant_id  # type: ignore[no-any-return]


async def ensure_tenant_context(request: Request) -> None:
    """Route guard asserting authentication established a tenant."""
    get_tenant_id(request)


TenantId = Annotated[UUID, Depends(get_tenant_id)]
