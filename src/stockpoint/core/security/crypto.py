"""Cryptographic utilities - password hashing and JWT access tokens."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any
from uuid import UUID

import argon2
from jose import ExpiredSignatureError, JWTError, jwt

from src.stockpoint.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


class TokenExpiredError(Exception):
    """Access token signature is valid but its lifetime has lapsed."""


class InvalidTokenError(Exception):
    """Access token is malformed, tampered with, or of the wrong type."""


@lru_cache
def _get_password_hasher() -> argon2.PasswordHasher:
    """Create password hasher with settings from config."""
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


def hash_password(password: str) -> str:
    """Hash password using Argon2id."""
    return _get_password_hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against hash. Returns False on any error."""
    try:
        return _get_password_hasher().verify(hashed, password)
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.VerificationError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


@lru_cache
def get_dummy_password_hash() -> str:
    """Hash verified against when the login email is unknown (timing safety)."""
    return hash_password("stockpoint-dummy-password-never-matches")


def create_access_token(
    user_id: str | UUID,
    tenant_id: str | UUID,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token carrying user and tenant identity."""
    settings = get_settings()

    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.access_token_expire_seconds)

    to_encode = {
        "sub": str(user_id),
        "tenant_id": str(tenant_id),
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(  # type: ignore[no-any-return]
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry of an access token and return its claims.

    Raises:
        TokenExpiredError: The token has expired.
        InvalidTokenError: Any other verification failure.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError("Invalid token type")
    return payload
