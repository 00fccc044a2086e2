"""Authenticated request context."""

from dataclasses import dataclass
from uuid import UUID

from fastapi import Request

from src.stockpoint.services.permission_resolver import ResolvedAccess


@dataclass(frozen=True)
class AuthContext:
    """Identity and effective access of the caller, fixed for one request."""

    user_id: UUID
    tenant_id: UUID
    email: str
    access: ResolvedAccess

    @property
    def role_names(self) -> tuple[str, ...]:
        return self.access.role_names

    @property
    def permissions(self) -> frozenset[str]:
        return self.access.effective_permissions

    @property
    def allowed_location_ids(self) -> tuple[str, ...]:
        return self.access.allowed_location_ids


def get_auth_context(request: Request) -> AuthContext | None:
    """Context set by authentication, or None if it never ran."""
    return getattr(request.state, "auth", None)
