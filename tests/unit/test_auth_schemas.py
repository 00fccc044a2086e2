"""Tests for auth request validation."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from src.stockpoint.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
)

pytestmark = pytest.mark.unit


class TestLoginRequest:
    def test_email_is_lower_cased(self):
        assert LoginRequest(email="Owner@Shop.TEST", password="x").email == "owner@shop.test"

    def test_tenant_id_optional(self):
        assert LoginRequest(email="a@shop.test", password="x").tenant_id is None

    @pytest.mark.parametrize("password", ["", "x" * 101])
    def test_password_length(self, password: str):
        with pytest.raises(ValidationError):
            LoginRequest(email="a@shop.test", password=password)

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="not-an-email", password="x")


class TestResetPasswordRequest:
    def test_strong_password_accepted(self):
        data = ResetPasswordRequest(token="abc.def", new_password="violet-tractor-marmalade-91")
        assert data.new_password == "violet-tractor-marmalade-91"

    @pytest.mark.parametrize("password", ["password", "12345678", "qwertyuiop"])
    def test_weak_password_rejected(self, password: str):
        with pytest.raises(ValidationError, match="[Ww]eak|too weak"):
            ResetPasswordRequest(token="abc.def", new_password=password)

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError):
            ResetPasswordRequest(token="abc.def", new_password="Ab1!")

    def test_token_bounds(self):
        with pytest.raises(ValidationError):
            ResetPasswordRequest(token="ab", new_password="violet-tractor-marmalade-91")
        with pytest.raises(ValidationError):
            ResetPasswordRequest(token="a" * 257, new_password="violet-tractor-marmalade-91")


@given(email=st.emails())
@settings(max_examples=50)
def test_forgot_password_email_always_normalized(email: str):
    try:
        data = ForgotPasswordRequest(email=email)
    except ValidationError:
        # Hypothesis generates some addresses email-validator rejects
        return
    assert data.email == data.email.lower()
