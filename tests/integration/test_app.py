"""Application lifecycle tests using the real store handle."""

import pytest
from httpx import ASGITransport, AsyncClient

from mapprism.api.app import create_app, lifespan
from mapprism.settings import Settings

from helpers import TEST_TOKEN


@pytest.fixture
def file_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}",
        api_token=TEST_TOKEN,
    )


@pytest.mark.asyncio
async def test_lifespan_opens_and_closes_store(file_settings: Settings):
    app = create_app(file_settings)

    async with lifespan(app):
        db_manager = app.state.db_manager
        assert db_manager is not None

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post(
                "/recipes/validate",
                json={"definition": {"recipe": []}},
                headers={"Authorization": f"Bearer {TEST_TOKEN}"},
            )
            missing = await client.get(
                "/jobs/1", headers={"Authorization": f"Bearer {TEST_TOKEN}"}
            )

        assert response.status_code == 200
        assert response.json()["valid"] is False
        assert missing.status_code == 404

    assert app.state.db_manager is None
    assert db_manager._async_engine is None


@pytest.mark.asyncio
async def test_requests_fail_without_store(file_settings: Settings):
    app = create_app(file_settings)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/jobs/1", headers={"Authorization": f"Bearer {TEST_TOKEN}"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


@pytest.mark.asyncio
async def test_database_manager_create_and_drop(file_settings: Settings):
    from sqlalchemy import inspect

    from mapprism.utils.db_manager import DatabaseManager

    db_manager = DatabaseManager(file_settings)
    assert "async_initialized=False" in repr(db_manager)

    await db_manager.create_db_and_tables_async()
    async with db_manager.async_engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    assert {"recipe", "job", "job_step", "job_artifact", "job_output", "step_executor"} <= set(
        tables
    )

    await db_manager.drop_db_and_tables_async()
    async with db_manager.async_engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    assert tables == []

    await db_manager.close()
