from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, EmailStr, Field, field_validator
from zxcvbn import zxcvbn

from src.stockpoint.schemas.user import UserRead

# Minimum zxcvbn score (0-4 scale): 3 = "safely unguessable"
MIN_PASSWORD_SCORE = 3

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent."


# Emails are stored lower-cased
NormalizedEmail = Annotated[EmailStr, AfterValidator(lambda v: v.lower())]


class LoginRequest(BaseModel):
    email: NormalizedEmail
    password: str = Field(min_length=1, max_length=100)
    tenant_id: UUID | None = Field(
        default=None,
        description="Required when the same email is registered with several tenants.",
    )


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: UserRead
    access_token: str
    token_type: str = "bearer"


class RefreshResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str


class ForgotPasswordRequest(BaseModel):
    email: NormalizedEmail
    tenant_id: UUID | None = None


class ResetPasswordRequest(BaseModel):
    # "<uuid>.<128 hex chars>" is well under the upper bound
    token: str = Field(min_length=3, max_length=256)
    new_password: str = Field(min_length=8, max_length=100)

    @field_validator("new_password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Validate password strength using zxcvbn entropy estimation."""
        result = zxcvbn(v)
        score = result["score"]  # 0-4 scale

        if score < MIN_PASSWORD_SCORE:
            feedback = result.get("feedback", {})
            warning = feedback.get("warning", "")
            suggestions = feedback.get("suggestions", [])

            if warning:
                raise ValueError(f"Weak password: {warning}")
            elif suggestions:
                raise ValueError(f"Weak password: {suggestions[0]}")
            else:
                raise ValueError(
                    "Password is too weak. Use a longer password with a mix of characters."
                )

        return v
