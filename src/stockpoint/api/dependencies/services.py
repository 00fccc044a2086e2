"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from src.stockpoint.api.dependencies.db import DBSession
from src.stockpoint.api.dependencies.repositories import PasswordResetRepo, TokenRepo, UserRepo
from src.stockpoint.core.cache import TokenRevocationCache
from src.stockpoint.services import AuthService, PasswordResetService, RefreshTokenService


def get_revocation_cache(request: Request) -> TokenRevocationCache:
    """Revocation cache over the Redis client created in the lifespan (may be None)."""
    return TokenRevocationCache(getattr(request.app.state, "redis", None))


RevocationCache = Annotated[TokenRevocationCache, Depends(get_revocation_cache)]


def get_refresh_token_service(
    token_repo: TokenRepo,
    user_repo: UserRepo,
    session: DBSession,
    cache: RevocationCache,
) -> RefreshTokenService:
    return RefreshTokenService(token_repo, user_repo, session, cache)


RefreshTokenServiceDep = Annotated[RefreshTokenService, Depends(get_refresh_token_service)]


def get_auth_service(user_repo: UserRepo, refresh_tokens: RefreshTokenServiceDep) -> AuthService:
    return AuthService(user_repo, refresh_tokens)


def get_password_reset_service(
    user_repo: UserRepo,
    reset_repo: PasswordResetRepo,
    refresh_tokens: RefreshTokenServiceDep,
    session: DBSession,
) -> PasswordResetService:
    return PasswordResetService(user_repo, reset_repo, refresh_tokens, session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PasswordResetServiceDep = Annotated[PasswordResetService, Depends(get_password_reset_service)]
