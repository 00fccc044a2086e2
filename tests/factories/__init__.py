"""Test factories for generating test data.

    from tests.factories import UserFactory, RoleFactory, ...
"""

from tests.factories.auth import PasswordResetTokenFactory, RefreshTokenFactory
from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.rbac import PermissionFactory, RoleFactory, build_permissions
from tests.factories.tenant import LocationFactory, TenantFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Tenant
    "LocationFactory",
    "TenantFactory",
    # User
    "DEFAULT_TEST_PASSWORD",
    "UserFactory",
    # RBAC
    "PermissionFactory",
    "RoleFactory",
    "build_permissions",
    # Auth
    "PasswordResetTokenFactory",
    "RefreshTokenFactory",
]
