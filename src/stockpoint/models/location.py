"""Location models - stores and warehouses a user may be granted."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.stockpoint.models.base import utc_now


class Location(SQLModel, table=True):
    __tablename__ = "locations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    name: str = Field(max_length=100)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)


class UserLocation(SQLModel, table=True):
    """Location-level access grant for a user."""

    __tablename__ = "user_locations"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    location_id: UUID = Field(foreign_key="locations.id", primary_key=True, ondelete="CASCADE")
    assigned_at: datetime = Field(default_factory=utc_now)
