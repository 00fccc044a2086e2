"""Security utilities - opaque tokens, passwords and access tokens.

Re-exports all security-related functions for convenience.
"""

from src.stockpoint.core.security.crypto import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    get_dummy_password_hash,
    hash_password,
    verify_password,
)
from src.stockpoint.core.security.tokens import (
    build_composite_token,
    compare_token,
    generate_secure_token,
    hash_token,
    split_composite_token,
)

__all__ = [
    # Crypto
    "InvalidTokenError",
    "TokenExpiredError",
    "create_access_token",
    "decode_access_token",
    "get_dummy_password_hash",
    "hash_password",
    "verify_password",
    # Opaque tokens
    "build_composite_token",
    "compare_token",
    "generate_secure_token",
    "hash_token",
    "split_composite_token",
]
