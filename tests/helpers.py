"""Shared helpers for authenticated users and refresh cookies in tests."""

from http.cookies import Morsel, SimpleCookie
from uuid import UUID

from httpx import Response

from src.stockpoint.core.security import create_access_token
from src.stockpoint.models import Location, Role, User
from tests.factories import LocationFactory, RoleFactory, UserFactory, build_permissions


def build_role(
    tenant_id: UUID,
    *permission_keys: str,
    name: str | None = None,
    grants_all_locations: bool = False,
) -> Role:
    kwargs = {"name": name} if name else {}
    role = RoleFactory.build(
        tenant_id=tenant_id, grants_all_locations=grants_all_locations, **kwargs
    )
    role.permissions = build_permissions(*permission_keys)
    return role


def build_user_with_access(
    tenant_id: UUID,
    roles: list[Role] | None = None,
    locations: list[Location] | None = None,
    **kwargs,
) -> User:
    """Build a user with roles and location grants wired in memory."""
    user = UserFactory.build(tenant_id=tenant_id, **kwargs)
    user.roles = roles or []
    user.locations = locations or []
    return user


def build_locations(tenant_id: UUID, count: int) -> list[Location]:
    return [LocationFactory.build(tenant_id=tenant_id) for _ in range(count)]


def auth_headers(user: User) -> dict[str, str]:
    """Authorization header with a fresh access token for the user."""
    return {"Authorization": f"Bearer {create_access_token(user.id, user.tenant_id)}"}


REFRESH_COOKIE = "refreshToken"


def refresh_cookie(response: Response) -> Morsel | None:
    """The refresh cookie morsel set by a response, or None."""
    for header in response.headers.get_list("set-cookie"):
        cookie = SimpleCookie()
        cookie.load(header)
        if REFRESH_COOKIE in cookie:
            return cookie[REFRESH_COOKIE]
    return None


def cookie_header(token: str) -> dict[str, str]:
    return {"Cookie": f"{REFRESH_COOKIE}={token}"}
