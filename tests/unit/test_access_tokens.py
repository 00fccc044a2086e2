"""Tests for password hashing and JWT access tokens."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from jose import jwt

from src.stockpoint.core.config import get_settings
from src.stockpoint.core.security import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    get_dummy_password_hash,
    hash_password,
    verify_password,
)

pytestmark = pytest.mark.unit


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("correct-horse-battery-staple")
        assert hashed.startswith("$argon2id$")
        assert verify_password("correct-horse-battery-staple", hashed) is True

    def test_wrong_password(self):
        hashed = hash_password("correct-horse-battery-staple")
        assert verify_password("wrong-password", hashed) is False

    def test_invalid_hash_returns_false(self):
        """Corrupt stored hashes are treated as a mismatch, not an error."""
        assert verify_password("anything", "not-an-argon2-hash") is False

    def test_dummy_hash_is_stable_and_never_matches_user_input(self):
        assert get_dummy_password_hash() == get_dummy_password_hash()
        assert verify_password("password", get_dummy_password_hash()) is False


class TestAccessToken:
    def test_claims(self):
        user_id, tenant_id = uuid4(), uuid4()
        payload = decode_access_token(create_access_token(user_id, tenant_id))

        assert payload["sub"] == str(user_id)
        assert payload["tenant_id"] == str(tenant_id)
        assert payload["type"] == "access"
        assert payload["exp"] > payload["iat"]

    def test_default_lifetime_comes_from_settings(self):
        payload = decode_access_token(create_access_token(uuid4(), uuid4()))
        assert payload["exp"] - payload["iat"] == get_settings().access_token_expire_seconds

    def test_expired_token(self):
        token = create_access_token(uuid4(), uuid4(), expires_delta=timedelta(seconds=-1))
        with pytest.raises(TokenExpiredError):
            decode_access_token(token)

    def test_tampered_token(self):
        token = create_access_token(uuid4(), uuid4())
        tampered = token[:-4] + ("AAAA" if not token.endswith("AAAA") else "BBBB")
        with pytest.raises(InvalidTokenError):
            decode_access_token(tampered)

    def test_wrong_secret(self):
        settings = get_settings()
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": str(uuid4()), "tenant_id": str(uuid4()), "type": "access", "exp": now + timedelta(minutes=5)},
            "another-secret-key-that-is-long-enough",
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_wrong_token_type(self):
        """A correctly signed token of another type is not an access token."""
        settings = get_settings()
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": str(uuid4()), "tenant_id": str(uuid4()), "type": "refresh", "exp": now + timedelta(minutes=5)},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(InvalidTokenError, match="Invalid token type"):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("not.a.jwt")
