"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.stockpoint.api.dependencies.db import DBSession
from src.stockpoint.repositories import (
    PasswordResetTokenRepository,
    PermissionRepository,
    RefreshTokenRepository,
    RoleRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_token_repository(session: DBSession) -> RefreshTokenRepository:
    return RefreshTokenRepository(session)


def get_password_reset_repository(session: DBSession) -> PasswordResetTokenRepository:
    return PasswordResetTokenRepository(session)


def get_permission_repository(session: DBSession) -> PermissionRepository:
    return PermissionRepository(session)


def get_role_repository(session: DBSession) -> RoleRepository:
    return RoleRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
TokenRepo = Annotated[RefreshTokenRepository, Depends(get_token_repository)]
PasswordResetRepo = Annotated[PasswordResetTokenRepository, Depends(get_password_reset_repository)]
PermissionRepo = Annotated[PermissionRepository, Depends(get_permission_repository)]
RoleRepo = Annotated[RoleRepository, Depends(get_role_repository)]
