"""Seed the permission catalog, a tenant and its first admin.

Usage:
    python -m src.stockpoint.seed --tenant "Main Store" --admin-email admin@example.com
"""

import argparse
import asyncio
import os

from src.stockpoint.core.config import get_settings
from src.stockpoint.core.db import create_engine_from_settings, create_session_factory
from src.stockpoint.core.logging import get_logger, setup_logging
from src.stockpoint.core.migrations import run_migrations_sync
from src.stockpoint.services.seed_service import SeedService

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed initial authorization data")
    parser.add_argument("--tenant", default=os.getenv("SEED_TENANT_NAME", "Default Tenant"))
    parser.add_argument("--admin-email", default=os.getenv("SEED_ADMIN_EMAIL", "admin@example.com"))
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    parser.add_argument(
        "--migrate", action="store_true", help="Apply database migrations before seeding"
    )
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    settings = get_settings()
    setup_logging(debug=settings.debug)

    password = os.getenv("SEED_ADMIN_PASSWORD")
    if not password:
        raise SystemExit("SEED_ADMIN_PASSWORD must be set")

    if args.migrate:
        # Alembic is sync; keep it off the event loop
        await asyncio.to_thread(run_migrations_sync)

    engine = create_engine_from_settings(settings)
    session_factory = create_session_factory(engine)
    try:
        async with session_factory() as session:
            tenant = await SeedService(session).seed_tenant(
                args.tenant,
                args.admin_email,
                password,
                admin_first_name=args.first_name,
                admin_last_name=args.last_name,
            )
        logger.info("Tenant seeded", tenant_id=str(tenant.id), tenant_name=tenant.name)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
