"""Opaque token helpers - generation, at-rest hashing and comparison.

Refresh and password reset secrets are 256+ bits of CSPRNG output, so a fast
cryptographic hash is enough to protect them at rest.
"""

import hmac
import secrets
from hashlib import sha256

DEFAULT_TOKEN_BYTES = 32

# Separator between the record id and the secret in composite tokens
COMPOSITE_SEPARATOR = "."


def generate_secure_token(byte_length: int = DEFAULT_TOKEN_BYTES) -> str:
    """Return ``byte_length`` random bytes from the CSPRNG, hex encoded."""
    return secrets.token_hex(byte_length)


def hash_token(token: str) -> str:
    """Hash a token using SHA256 for secure storage."""
    return sha256(token.encode()).hexdigest()


def compare_token(token: str, token_hash: str) -> bool:
    """Check a raw token against a stored hash in constant time."""
    return hmac.compare_digest(hash_token(token), token_hash)


def build_composite_token(record_id: object, secret: str) -> str:
    """Encode a token as ``<record_id>.<secret>`` for primary-key lookup."""
    return f"{record_id}{COMPOSITE_SEPARATOR}{secret}"


def split_composite_token(token: str) -> tuple[str, str] | None:
    """Split a composite token into (record_id, secret).

    Returns None unless the token has exactly two non-empty parts.
    """
    parts = token.split(COMPOSITE_SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]
