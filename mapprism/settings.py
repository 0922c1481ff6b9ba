"""
Configuration settings for MapPrism.

This module provides a settings class for MapPrism, with support for loading
configuration from TOML files and environment variables.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)


class DatabaseDriver(str, Enum):
    """Supported database drivers."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql+psycopg2"
    POSTGRESQL_ASYNC = "postgresql+asyncpg"


# Sync driver prefix -> async driver prefix
ASYNC_DRIVERS = {
    "sqlite:": "sqlite+aiosqlite:",
    "postgresql+psycopg2:": "postgresql+asyncpg:",
    "postgresql:": "postgresql+asyncpg:",
}


def to_async_url(url: str) -> str:
    """Rewrite a sync SQLAlchemy URL to the matching async driver."""
    for sync_prefix, async_prefix in ASYNC_DRIVERS.items():
        if url.startswith(sync_prefix):
            return async_prefix + url.removeprefix(sync_prefix)
    return url


class Settings(BaseSettings):
    """Main settings class for MapPrism.

    Values are read from keyword arguments first, then ``MAPPRISM_*``
    environment variables, then ``settings.toml`` / ``settings.custom.toml``.
    """

    model_config = SettingsConfigDict(
        toml_file=["settings.toml", "settings.custom.toml"],
        env_prefix="MAPPRISM_",
        extra="ignore",
    )

    # Server settings
    port: int = 3000
    host: str = "127.0.0.1"
    root_url: str = "/"
    debug: bool = False

    # Security settings
    api_token: str = ""

    # Database settings
    database_driver: DatabaseDriver = DatabaseDriver.SQLITE
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "mapprism"
    database_username: str = "postgres"
    database_password: str = "postgres"
    database_url: str | None = None  # Overrides the individual fields when set
    create_tables_on_startup: bool = True

    # Logging settings
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: str | None = None  # If None, will use ./logs
    log_rotation: str = "20 MB"
    log_retention: str = "1 week"
    log_format: str | None = None  # Use default if None
    log_requests: bool = True

    @classmethod
    def settings_customize_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the sources for settings.

        Priority order: explicit arguments, environment variables, then TOML config files
        """
        return init_settings, env_settings, TomlConfigSettingsSource(settings_cls)

    @property
    def sync_database_url(self) -> str:
        """Get the synchronous database URL for SQLAlchemy."""
        if self.database_url:
            return (
                self.database_url.replace("sqlite+aiosqlite:", "sqlite:", 1)
                .replace("postgresql+asyncpg:", "postgresql+psycopg2:", 1)
            )
        if self.database_driver == DatabaseDriver.SQLITE:
            return f"sqlite:///{self.database_name}.db"
        driver = DatabaseDriver.POSTGRESQL.value
        return f"{driver}://{self.database_username}:{self.database_password}@{self.database_host}:{self.database_port}/{self.database_name}"

    @property
    def async_database_url(self) -> str:
        """Get the async database URL (aiosqlite / asyncpg)."""
        return to_async_url(self.sync_database_url)

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured store is SQLite."""
        return self.sync_database_url.startswith("sqlite")

    def get_log_dir(self) -> Path:
        """Get the log directory path.

        Returns:
            Path to the log directory. Uses log_dir if specified,
            otherwise ``logs`` in the current working directory.
        """
        if self.log_dir:
            return Path(self.log_dir)
        return Path.cwd() / "logs"


@lru_cache
def get_settings() -> Settings:
    """Get the settings instance, with caching.

    Returns:
        Cached Settings instance
    """
    return Settings()


# Create a global settings instance for easy imports
settings = get_settings()
