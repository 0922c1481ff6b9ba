"""
Database manager for MapPrism.

This module provides the store handle: an explicitly constructed object that
owns the async engine and session factory and must be closed explicitly.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from ..settings import Settings
from .logger import logger


class DatabaseManager:
    """
    Owns database connections for one application instance.

    The engine is created lazily on first use and disposed by :meth:`close`.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._async_engine: AsyncEngine | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None

    def _create_async_engine(self) -> AsyncEngine:
        """Create and configure the asynchronous database engine."""
        async_url = self.settings.async_database_url

        if self.settings.is_sqlite:
            in_memory = ":memory:" in async_url
            engine = create_async_engine(
                async_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool if in_memory else None,
                echo=self.settings.debug,
            )
        else:
            engine = create_async_engine(
                async_url,
                echo=self.settings.debug,
                pool_size=20,
                max_overflow=0,
                pool_pre_ping=True,
            )

        logger.info(f"Async database engine created: {async_url.split('@')[-1]}")
        return engine

    @property
    def async_engine(self) -> AsyncEngine:
        """Get or create the asynchronous database engine."""
        if self._async_engine is None:
            self._async_engine = self._create_async_engine()
        return self._async_engine

    @property
    def async_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the async session factory."""
        if self._async_session_factory is None:
            self._async_session_factory = async_sessionmaker(
                self.async_engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._async_session_factory

    async def create_db_and_tables_async(self) -> None:
        """Create database tables asynchronously."""
        # Register every table on the metadata
        import mapprism.models  # noqa: F401

        logger.info("Creating database tables (async)...")
        async with self.async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables created (async)")

    async def drop_db_and_tables_async(self) -> None:
        """Drop all database tables asynchronously."""
        logger.info("Dropping database tables (async)...")
        async with self.async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        logger.info("Database tables dropped (async)")

    @asynccontextmanager
    async def get_async_session_context(self) -> AsyncGenerator[AsyncSession]:
        """
        Get an async database session as a context manager.

        Usage:
            async with db_manager.get_async_session_context() as session:
                session.add(model_instance)
                await session.commit()

        Yields:
            AsyncSession: SQLModel async session
        """
        async with self.async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                logger.error(f"Database error: {e}")
                await session.rollback()
                raise
            finally:
                await session.close()

    async def get_async_session(self) -> AsyncGenerator[AsyncSession]:
        """Yield a session for the duration of one request."""
        async with self.get_async_session_context() as session:
            yield session

    async def close(self) -> None:
        """Close all database connections."""
        if self._async_engine:
            await self._async_engine.dispose()
            self._async_engine = None
            self._async_session_factory = None
            logger.info("Async database engine disposed")

    def __repr__(self) -> str:
        """String representation of the DatabaseManager."""
        return (
            f"<DatabaseManager("
            f"driver={self.settings.database_driver.value}, "
            f"async_initialized={self._async_engine is not None}"
            f")>"
        )
