"""Integration test fixtures backed by a real PostgreSQL database.

These fixtures require external resources (PostgreSQL at DATABASE_URL).
Tests are skipped when the database cannot be reached. Redis is still
fakeredis; the database is authoritative for every token decision.
"""

import asyncio
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from src.stockpoint.core.config import get_settings
from src.stockpoint.core.db import create_session_factory
from src.stockpoint.core.migrations import run_migrations_sync
from src.stockpoint.main import app
from src.stockpoint.models import Tenant, User
from tests.factories import (
    LocationFactory,
    PermissionFactory,
    RoleFactory,
    TenantFactory,
    UserFactory,
)
from tests.utils.cleanup import cleanup_permissions, cleanup_tenant_cascade


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)

    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, SQLAlchemyError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL not reachable: {e}")

    # Alembic is sync; keep it off the event loop
    await asyncio.to_thread(run_migrations_sync)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for arranging and inspecting rows.

    The session does not auto-commit; fixtures commit what they create.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """The same factory the application builds, bound to the test engine."""
    return create_session_factory(engine)


async def _create_tenant(db_session: AsyncSession) -> Tenant:
    tenant = TenantFactory.build()
    db_session.add(tenant)
    await db_session.commit()
    return tenant


@pytest.fixture
async def test_tenant(engine: AsyncEngine, db_session: AsyncSession) -> AsyncGenerator[Tenant]:
    tenant = await _create_tenant(db_session)
    yield tenant
    async with engine.connect() as conn:
        await cleanup_tenant_cascade(conn, tenant.id)
        await conn.commit()


@pytest.fixture
async def other_tenant(engine: AsyncEngine, db_session: AsyncSession) -> AsyncGenerator[Tenant]:
    """A second tenant, for cross-tenant checks."""
    tenant = await _create_tenant(db_session)
    yield tenant
    async with engine.connect() as conn:
        await cleanup_tenant_cascade(conn, tenant.id)
        await conn.commit()


@pytest.fixture
async def test_user(
    engine: AsyncEngine, db_session: AsyncSession, test_tenant: Tenant
) -> AsyncGenerator[User]:
    """Active user of test_tenant with one role, one permission and one location."""
    permission = PermissionFactory.build()
    role = RoleFactory.build(tenant_id=test_tenant.id)
    role.permissions = [permission]
    user = UserFactory.build(tenant_id=test_tenant.id)
    user.roles = [role]
    user.locations = [LocationFactory.build(tenant_id=test_tenant.id)]
    db_session.add(user)
    await db_session.commit()

    yield user

    # Users, roles and locations go with the tenant
    async with engine.connect() as conn:
        await cleanup_permissions(conn, [permission.permission_key])
        await conn.commit()


@pytest.fixture
async def client(
    monkeypatch: pytest.MonkeyPatch,
    session_factory: async_sessionmaker[AsyncSession],
    fake_redis: Redis,
) -> AsyncGenerator[AsyncClient]:
    """HTTP client over the real repositories and database.

    The lifespan does not run under ASGITransport, so the clients it would
    create are put on app.state here.
    """
    monkeypatch.setattr(app.state, "session_factory", session_factory, raising=False)
    monkeypatch.setattr(app.state, "redis", fake_redis, raising=False)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
