"""User factory for test data generation."""

from polyfactory import Use

from src.stockpoint.core.security import hash_password
from src.stockpoint.models import User
from tests.factories.base import BaseFactory, generate_uuid, utc_now

# Default test password - strong enough for the reset password policy too
DEFAULT_TEST_PASSWORD = "correct-horse-battery-staple"


class UserFactory(BaseFactory):
    __model__ = User

    id = Use(generate_uuid)
    tenant_id = None  # Required FK - must be set explicitly
    email = Use(lambda: f"user_{generate_uuid().hex[-8:]}@example.com")
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    first_name = "Test"
    last_name = "User"
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def inactive(cls, **kwargs):
        """Create an inactive user."""
        return cls.build(is_active=False, **kwargs)
