"""Global fixtures: in-memory database, application client and sample registry."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from mapprism.api.app import create_app

# Import all models to ensure metadata is populated
from mapprism.models import *  # noqa: F403
from mapprism.models.step_executor import StepExecutor
from mapprism.settings import Settings
from mapprism.utils.database import get_async_session

from helpers import EXECUTORS, TEST_TOKEN, InMemoryRegistry, step


@pytest.fixture
def registry() -> InMemoryRegistry:
    """In-memory registry with the sample executors."""
    return InMemoryRegistry(EXECUTORS)


@pytest.fixture
def resize_definition() -> dict[str, Any]:
    """Single-step recipe: resize ``raw`` into ``thumb``."""
    return {"recipe": [step("s1", "resize", {"src": "raw"}, ["thumb"])]}


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with in-memory SQLite and a known API token."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        api_token=TEST_TOKEN,
        create_tables_on_startup=False,
        log_requests=False,
    )


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create test database session."""
    async_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded_executors(test_session: AsyncSession) -> list[StepExecutor]:
    """Register the sample executors in the database."""
    executors = [
        StepExecutor(step_type=step_type, accepts=accepts, produces=produces)
        for step_type, (accepts, produces) in EXECUTORS.items()
    ]
    test_session.add_all(executors)
    await test_session.commit()
    return executors


@pytest.fixture
def app(test_settings: Settings, test_session: AsyncSession) -> FastAPI:
    """Application instance using the test session."""
    application = create_app(test_settings)

    async def override_get_session() -> AsyncGenerator[AsyncSession]:
        yield test_session

    application.dependency_overrides[get_async_session] = override_get_session
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create test API client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization header carrying the test token."""
    return {"Authorization": f"Bearer {TEST_TOKEN}"}
