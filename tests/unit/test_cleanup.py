"""Tests for the scheduled refresh token cleanup entry point."""

from contextlib import asynccontextmanager
from datetime import timedelta

import pytest

from src.stockpoint import cleanup
from tests.factories import RefreshTokenFactory, generate_uuid, utc_now
from tests.fakes import FakeRefreshTokenRepository, FakeSession, InMemoryStore

pytestmark = pytest.mark.unit


@pytest.fixture
def session_factory(session: FakeSession):
    @asynccontextmanager
    async def factory():
        yield session

    return factory


@pytest.fixture(autouse=True)
def in_memory_tokens(monkeypatch: pytest.MonkeyPatch, store: InMemoryStore):
    monkeypatch.setattr(
        cleanup, "RefreshTokenRepository", lambda _session: FakeRefreshTokenRepository(store)
    )


def add_tokens(store: InMemoryStore) -> dict[str, object]:
    user_id = generate_uuid()
    tokens = {
        "expired_long_ago": RefreshTokenFactory.build(
            user_id=user_id, expires_at=utc_now() - timedelta(days=60)
        ),
        "revoked_long_ago": RefreshTokenFactory.build(
            user_id=user_id, revoked_at=utc_now() - timedelta(days=45)
        ),
        "revoked_last_week": RefreshTokenFactory.build(
            user_id=user_id, revoked_at=utc_now() - timedelta(days=7)
        ),
        "active": RefreshTokenFactory.build(user_id=user_id),
    }
    for token in tokens.values():
        store.refresh_tokens[token.id] = token
    return tokens


async def test_run_cleanup_uses_configured_retention(
    session_factory, store: InMemoryStore, session: FakeSession
):
    tokens = add_tokens(store)

    deleted = await cleanup.run_cleanup(session_factory)

    assert deleted == 2
    assert set(store.refresh_tokens) == {tokens["revoked_last_week"].id, tokens["active"].id}
    assert session.commits == 1


async def test_run_cleanup_with_explicit_retention(session_factory, store: InMemoryStore):
    tokens = add_tokens(store)

    deleted = await cleanup.run_cleanup(session_factory, retention_days=1)

    assert deleted == 3
    assert set(store.refresh_tokens) == {tokens["active"].id}


def test_parse_args_defaults_to_settings():
    assert cleanup.parse_args([]).retention_days is None
    assert cleanup.parse_args(["--retention-days", "10"]).retention_days == 10


def test_parse_args_rejects_negative_retention():
    with pytest.raises(SystemExit):
        cleanup.parse_args(["--retention-days", "-1"])
