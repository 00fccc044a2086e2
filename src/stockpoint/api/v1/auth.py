"""Authentication endpoints - login, refresh, logout and password reset.

These run outside the authentication chain. The refresh token only ever
travels in an HttpOnly cookie.
"""

from fastapi import APIRouter, Response
from starlette.requests import Request

from src.stockpoint.api.dependencies import (
    AuthServiceDep,
    PasswordResetServiceDep,
    RefreshTokenServiceDep,
)
from src.stockpoint.core.config import get_settings
from src.stockpoint.core.exceptions import ApiError
from src.stockpoint.core.logging import get_logger
from src.stockpoint.core.rate_limit import auth_rate_limit, limiter
from src.stockpoint.schemas.auth import (
    FORGOT_PASSWORD_MESSAGE,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshResponse,
    ResetPasswordRequest,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _client_info(request: Request) -> tuple[str | None, str | None]:
    ip_address = request.client.host if request.client else None
    return ip_address, request.headers.get("user-agent")


def set_refresh_token_cookie(response: Response, refresh_token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.refresh_token_cookie_name,
        value=refresh_token,
        max_age=settings.refresh_token_ttl_seconds,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


def clear_refresh_token_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.refresh_token_cookie_name,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        200: {"description": "Authenticated; refresh token set as HttpOnly cookie"},
        401: {"description": "Incorrect email or password"},
    },
)
@limiter.limit(auth_rate_limit)
async def login(
    request: Request,
    response: Response,
    login_data: LoginRequest,
    service: AuthServiceDep,
) -> LoginResponse:
    """Authenticate with email and password.

    ``tenant_id`` is only needed when the email is registered with more than
    one tenant.
    """
    ip_address, user_agent = _client_info(request)
    body, refresh_token = await service.login(
        login_data.email,
        login_data.password,
        tenant_id=login_data.tenant_id,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    set_refresh_token_cookie(response, refresh_token)
    return body


@router.post(
    "/refresh-token",
    response_model=RefreshResponse,
    responses={
        200: {"description": "New access token; refresh cookie rotated"},
        401: {"description": "Refresh token missing, invalid, expired or revoked"},
    },
)
@limiter.limit(auth_rate_limit)
async def refresh_token(
    request: Request,
    response: Response,
    service: RefreshTokenServiceDep,
) -> RefreshResponse:
    """Rotate the refresh token cookie and issue a new access token.

    Each refresh token can be exchanged once. Replaying it fails with 401.
    """
    token = request.cookies.get(get_settings().refresh_token_cookie_name)
    if not token:
        logger.warning("Refresh token request without cookie")
        raise ApiError.unauthorized("Refresh token missing")

    ip_address, user_agent = _client_info(request)
    new_refresh_token, access_token = await service.rotate(token, ip_address, user_agent)
    set_refresh_token_cookie(response, new_refresh_token)
    return RefreshResponse(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
@limiter.limit(auth_rate_limit)
async def logout(
    request: Request,
    response: Response,
    service: AuthServiceDep,
) -> MessageResponse:
    """Revoke the refresh token from the cookie, if any, and clear the cookie."""
    await service.logout(request.cookies.get(get_settings().refresh_token_cookie_name))
    clear_refresh_token_cookie(response)
    return MessageResponse(message="Logout successful")


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit(auth_rate_limit)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    service: PasswordResetServiceDep,
) -> MessageResponse:
    """Email a password reset link. The answer never reveals whether the account exists."""
    await service.forgot_password(data.email, data.tenant_id)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid or expired reset token, or password too weak"},
    },
)
@limiter.limit(auth_rate_limit)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    service: PasswordResetServiceDep,
) -> MessageResponse:
    """Set a new password. Signs the user out of every session."""
    await service.reset_password(data.token, data.new_password)
    return MessageResponse(message="Password has been reset successfully")
