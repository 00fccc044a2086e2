"""Delete refresh tokens that expired or were revoked long ago.

Meant for a scheduled job (cron, Kubernetes CronJob).

Usage:
    python -m src.stockpoint.cleanup [--retention-days 30]
"""

import argparse
import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.stockpoint.core.cache import TokenRevocationCache
from src.stockpoint.core.config import get_settings
from src.stockpoint.core.db import create_engine_from_settings, create_session_factory
from src.stockpoint.core.logging import get_logger, setup_logging
from src.stockpoint.repositories import RefreshTokenRepository, UserRepository
from src.stockpoint.services.refresh_token_service import RefreshTokenService

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete long-dead refresh tokens")
    parser.add_argument(
        "--retention-days",
        type=int,
        default=None,
        help="Keep rows expired or revoked within this many days (default: TOKEN_CLEANUP_RETENTION_DAYS)",
    )
    args = parser.parse_args(argv)
    if args.retention_days is not None and args.retention_days < 0:
        parser.error("--retention-days must not be negative")
    return args


async def run_cleanup(
    session_factory: async_sessionmaker[AsyncSession], retention_days: int | None = None
) -> int:
    """Run one cleanup pass in its own session. Returns rows deleted."""
    async with session_factory() as session:
        # Deleting rows never touches the revocation cache
        service = RefreshTokenService(
            RefreshTokenRepository(session),
            UserRepository(session),
            session,
            TokenRevocationCache(None),
        )
        return await service.cleanup_expired(retention_days)


async def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(debug=settings.debug)

    engine = create_engine_from_settings(settings)
    try:
        await run_cleanup(create_session_factory(engine), args.retention_days)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
