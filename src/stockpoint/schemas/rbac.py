from uuid import UUID

from pydantic import BaseModel


class PermissionRead(BaseModel):
    id: UUID
    permission_key: str
    description: str | None

    model_config = {"from_attributes": True}


class RoleRead(BaseModel):
    id: UUID
    name: str
    description: str | None
    is_system_role: bool
    grants_all_locations: bool
    permissions: list[str]
