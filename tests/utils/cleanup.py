"""Database cleanup utilities for integration fixtures.

Rows owned by users (tokens, role and location grants) go with the user via
ON DELETE CASCADE; everything else is deleted in foreign key order.
"""

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection


async def cleanup_tenant_cascade(conn: AsyncConnection, tenant_id: UUID) -> None:
    """Delete a tenant and all of its rows.

    Order: users -> roles -> locations -> tenant
    """
    for statement in (
        "DELETE FROM users WHERE tenant_id = :id",
        "DELETE FROM roles WHERE tenant_id = :id",
        "DELETE FROM locations WHERE tenant_id = :id",
        "DELETE FROM tenants WHERE id = :id",
    ):
        await conn.execute(text(statement), {"id": tenant_id})


async def cleanup_permissions(conn: AsyncConnection, permission_keys: list[str]) -> None:
    """Delete catalog entries created by a test."""
    if not permission_keys:
        return
    await conn.execute(
        text("DELETE FROM permissions WHERE permission_key = ANY(:keys)"),
        {"keys": permission_keys},
    )
