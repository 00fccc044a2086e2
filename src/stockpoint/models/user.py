"""User model - scoped to a single tenant."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from src.stockpoint.models.base import utc_now
from src.stockpoint.models.location import Location, UserLocation
from src.stockpoint.models.rbac import Role, UserRole


class User(SQLModel, table=True):
    """User account. The same email may exist once per tenant.

    Users are deactivated rather than deleted.
    """

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    email: str = Field(max_length=255, index=True)
    hashed_password: str = Field(max_length=255)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    roles: list[Role] = Relationship(link_model=UserRole)
    locations: list[Location] = Relationship(link_model=UserLocation)
