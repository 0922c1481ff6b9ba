"""Database migration utilities using Alembic."""

from pathlib import Path

from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from mapprism.exceptions import MigrationError
from mapprism.settings import Settings, get_settings
from mapprism.utils.logger import logger

VERSION_TABLE = "migrations"


def get_alembic_config(settings: Settings | None = None) -> Config:
    """Get Alembic configuration.

    Args:
        settings: Settings providing the database URL; defaults to global settings

    Returns:
        Alembic Config object configured with project settings.

    Raises:
        MigrationError: If ``alembic.ini`` cannot be found.
    """
    settings = settings or get_settings()
    project_root = Path(__file__).parent.parent.parent
    alembic_ini = project_root / "alembic.ini"

    if not alembic_ini.exists():
        raise MigrationError(f"Alembic configuration not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(project_root / "alembic"))
    config.set_main_option("sqlalchemy.url", settings.sync_database_url)
    return config


def run_migrations(target: str = "head", settings: Settings | None = None) -> None:
    """Apply database migrations.

    Args:
        target: Migration target (e.g., "head", "+1", "-1", specific revision)
        settings: Settings providing the database URL
    """
    config = get_alembic_config(settings)

    logger.info(f"Running migrations to: {target}")

    if target.startswith("-"):
        command.downgrade(config, target)
    else:
        command.upgrade(config, target)

    logger.info("Migrations completed successfully")


def _read_revision(connection: Connection) -> str | None:
    context = MigrationContext.configure(connection, opts={"version_table": VERSION_TABLE})
    return context.get_current_revision()


async def get_current_revision(settings: Settings | None = None) -> str | None:
    """Get the current database migration revision.

    Returns:
        Current revision ID or None if no migrations applied
    """
    settings = settings or get_settings()
    engine = create_async_engine(settings.async_database_url)

    try:
        async with engine.connect() as connection:
            return await connection.run_sync(_read_revision)
    finally:
        await engine.dispose()


def get_head_revision(settings: Settings | None = None) -> str | None:
    """Get the newest revision known to the migration scripts."""
    script_dir = ScriptDirectory.from_config(get_alembic_config(settings))
    return script_dir.get_current_head()
