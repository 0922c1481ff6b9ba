"""
Database utilities for MapPrism.

FastAPI dependencies resolving the store handle created at application
startup and scoping a session to each request.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions.domain import ConfigurationError
from .db_manager import DatabaseManager


def get_db_manager(request: Request) -> DatabaseManager:
    """Get the store handle attached to the running application."""
    db_manager: DatabaseManager | None = getattr(request.app.state, "db_manager", None)
    if db_manager is None:
        raise ConfigurationError("Database manager is not initialized")
    return db_manager


async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """Get an async database session as a FastAPI dependency.

    Usage:
        @app.get("/items")
        async def get_items(session: AsyncSession = Depends(get_async_session)):
            result = await session.execute(select(Item))
            return result.scalars().all()

    Yields:
        AsyncSession: SQLModel async session
    """
    async for session in get_db_manager(request).get_async_session():
        yield session
