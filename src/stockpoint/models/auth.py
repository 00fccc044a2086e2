"""Authentication-related models - refresh and password reset tokens.

Only SHA-256 hashes of token secrets are stored. Clients hold composite
tokens of the form ``<record id>.<secret>``.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.stockpoint.models.base import utc_now


class RefreshToken(SQLModel, table=True):
    """Refresh token record. Revoked, never deleted, in normal flow."""

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    token_hash: str = Field(max_length=64)
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
    revoked_at: datetime | None = Field(default=None)
    ip_address: str | None = Field(default=None, max_length=45)
    user_agent: str | None = Field(default=None, max_length=512)

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expires_at


class PasswordResetToken(SQLModel, table=True):
    """Single-use password reset token. At most one unused token per user."""

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    token_hash: str = Field(max_length=64)
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
    used_at: datetime | None = Field(default=None)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or utc_now()) >= self.expires_at
