"""Migration runner."""

from alembic.config import Config

from alembic import command


def run_migrations_sync(config_path: str = "alembic.ini") -> None:
    """Run Alembic migrations up to head."""
    command.upgrade(Config(config_path), "head")
