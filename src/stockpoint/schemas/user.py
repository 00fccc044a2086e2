from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr


class UserRead(BaseModel):
    id: UUID
    tenant_id: UUID
    email: EmailStr
    first_name: str | None
    last_name: str | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class CurrentUserRead(BaseModel):
    """Authenticated identity and its effective access."""

    user_id: UUID
    tenant_id: UUID
    email: EmailStr
    roles: list[str]
    permissions: list[str]
    allowed_location_ids: list[str]
