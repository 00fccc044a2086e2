"""Repository queries against PostgreSQL: conditional updates, scoping and cleanup."""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.stockpoint.models import RefreshToken, Tenant, User
from src.stockpoint.repositories import (
    PasswordResetTokenRepository,
    RefreshTokenRepository,
    TenantRepository,
    UserRepository,
)
from tests.factories import PasswordResetTokenFactory, RefreshTokenFactory, utc_now

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def add_refresh_token(db_session: AsyncSession, user: User, **kwargs) -> RefreshToken:
    token = RefreshTokenFactory.build(user_id=user.id, **kwargs)
    db_session.add(token)
    await db_session.commit()
    return token


class TestRefreshTokenRepository:
    async def test_revoke_if_active_changes_one_row_once(self, db_session: AsyncSession, test_user: User):
        token = await add_refresh_token(db_session, test_user)
        repo = RefreshTokenRepository(db_session)

        assert await repo.revoke_if_active(token.id) == 1
        assert await repo.revoke_if_active(token.id) == 0

    async def test_concurrent_revocations_have_one_winner(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        db_session: AsyncSession,
        test_user: User,
    ):
        token = await add_refresh_token(db_session, test_user)

        async def revoke() -> int:
            async with session_factory() as session:
                count = await RefreshTokenRepository(session).revoke_if_active(token.id)
                await session.commit()
                return count

        assert sorted(await asyncio.gather(revoke(), revoke())) == [0, 1]

    async def test_revoke_all_skips_already_revoked(self, db_session: AsyncSession, test_user: User):
        for _ in range(2):
            await add_refresh_token(db_session, test_user)
        await add_refresh_token(db_session, test_user, revoked_at=utc_now())
        repo = RefreshTokenRepository(db_session)

        assert len(await repo.get_active_ids_for_user(test_user.id)) == 2
        assert await repo.revoke_all_for_user(test_user.id) == 2
        await db_session.commit()
        assert await repo.get_active_ids_for_user(test_user.id) == []

    async def test_cleanup_expired_keeps_recent_rows(self, db_session: AsyncSession, test_user: User):
        long_expired = await add_refresh_token(
            db_session, test_user, expires_at=utc_now() - timedelta(days=60)
        )
        recently_revoked = await add_refresh_token(db_session, test_user, revoked_at=utc_now())
        active = await add_refresh_token(db_session, test_user)
        repo = RefreshTokenRepository(db_session)

        # A shared database may hold other dead rows, so check only these
        await repo.cleanup_expired(retention_days=30)
        await db_session.commit()

        assert await repo.get_by_id(long_expired.id) is None
        assert await repo.get_by_id(recently_revoked.id) is not None
        assert await repo.get_by_id(active.id) is not None


class TestPasswordResetTokenRepository:
    async def test_mark_used_if_unused_changes_one_row_once(
        self, db_session: AsyncSession, test_user: User
    ):
        token = PasswordResetTokenFactory.build(user_id=test_user.id)
        db_session.add(token)
        await db_session.commit()
        repo = PasswordResetTokenRepository(db_session)

        assert await repo.mark_used_if_unused(token.id) == 1
        assert await repo.mark_used_if_unused(token.id) == 0

    async def test_delete_unused_keeps_used_tokens(self, db_session: AsyncSession, test_user: User):
        used = PasswordResetTokenFactory.build(user_id=test_user.id, used_at=utc_now())
        unused = PasswordResetTokenFactory.build(user_id=test_user.id)
        db_session.add_all([used, unused])
        await db_session.commit()
        repo = PasswordResetTokenRepository(db_session)

        assert await repo.delete_unused_for_user(test_user.id) == 1
        await db_session.commit()
        db_session.expunge_all()
        assert await repo.get_by_id(used.id) is not None
        assert await repo.get_by_id(unused.id) is None


class TestUserRepository:
    async def test_get_active_with_access_is_tenant_scoped(
        self, db_session: AsyncSession, test_user: User, other_tenant: Tenant
    ):
        db_session.expunge_all()
        repo = UserRepository(db_session)

        loaded = await repo.get_active_with_access(test_user.id, test_user.tenant_id)
        assert loaded is not None
        assert [r.name for r in loaded.roles] == [test_user.roles[0].name]
        assert loaded.roles[0].permissions[0].permission_key == (
            test_user.roles[0].permissions[0].permission_key
        )
        assert [loc.id for loc in loaded.locations] == [test_user.locations[0].id]

        assert await repo.get_active_with_access(test_user.id, other_tenant.id) is None

    async def test_get_by_email_is_case_insensitive(self, db_session: AsyncSession, test_user: User):
        repo = UserRepository(db_session)

        found = await repo.get_by_email(test_user.email.upper(), test_user.tenant_id)

        assert [u.id for u in found] == [test_user.id]


class TestTenantRepository:
    async def test_get_by_name(self, db_session: AsyncSession, test_tenant: Tenant):
        repo = TenantRepository(db_session)

        found = await repo.get_by_name(test_tenant.name)

        assert found is not None
        assert found.id == test_tenant.id
        assert await repo.get_by_name(f"{test_tenant.name} (missing)") is None
