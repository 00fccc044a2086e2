"""Role-based access control models.

Permissions are a global catalog; roles are per tenant.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from src.stockpoint.models.base import utc_now


class RolePermission(SQLModel, table=True):
    __tablename__ = "role_permissions"

    role_id: UUID = Field(foreign_key="roles.id", primary_key=True, ondelete="CASCADE")
    permission_id: UUID = Field(
        foreign_key="permissions.id", primary_key=True, ondelete="CASCADE"
    )
    assigned_at: datetime = Field(default_factory=utc_now)


class UserRole(SQLModel, table=True):
    __tablename__ = "user_roles"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    role_id: UUID = Field(foreign_key="roles.id", primary_key=True, ondelete="CASCADE")
    assigned_at: datetime = Field(default_factory=utc_now)


class Permission(SQLModel, table=True):
    """Global permission catalog entry, keyed like ``product:create``."""

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    permission_key: str = Field(max_length=100, unique=True, index=True)
    description: str | None = Field(default=None, max_length=255)


class Role(SQLModel, table=True):
    """Tenant role.

    ``is_system_role`` roles are seeded and must not be deleted.
    ``grants_all_locations`` gives holders access to every location of the
    tenant without individual grants.
    """

    __tablename__ = "roles"
    __table_args__ = (UniqueConstraint("tenant_id", "name", name="uq_roles_tenant_name"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    name: str = Field(max_length=50)
    description: str | None = Field(default=None, max_length=255)
    is_system_role: bool = Field(default=False)
    grants_all_locations: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)

    permissions: list[Permission] = Relationship(link_model=RolePermission)
