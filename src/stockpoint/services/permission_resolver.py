"""Effective access computation for an authenticated user.

Pure in-memory aggregation over a user whose roles, role permissions and
location grants are already loaded. No data access happens here.
"""

from dataclasses import dataclass

from src.stockpoint.models import User

ALL_LOCATIONS = "*"


@dataclass(frozen=True)
class ResolvedAccess:
    effective_permissions: frozenset[str]
    role_names: tuple[str, ...]
    allowed_location_ids: tuple[str, ...]

    @property
    def has_all_locations(self) -> bool:
        return self.allowed_location_ids == (ALL_LOCATIONS,)


def resolve_access(user: User) -> ResolvedAccess:
    """Union permissions across roles and work out location scope.

    Any role with ``grants_all_locations`` yields the ``("*",)`` wildcard;
    otherwise the explicit grants are returned sorted and de-duplicated.
    """
    permissions: set[str] = set()
    role_names: list[str] = []
    all_locations = False

    for role in user.roles:
        role_names.append(role.name)
        permissions.update(p.permission_key for p in role.permissions)
        all_locations = all_locations or role.grants_all_locations

    if all_locations:
        location_ids: tuple[str, ...] = (ALL_LOCATIONS,)
    else:
        location_ids = tuple(sorted({str(location.id) for location in user.locations}))

    return ResolvedAccess(
        effective_permissions=frozenset(permissions),
        role_names=tuple(role_names),
        allowed_location_ids=location_ids,
    )
