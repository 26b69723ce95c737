"""
Notes API — Database Handle and Startup Tests
===============================================

What:  Tests for Database connect/session/ping and the app lifespan.
How:   Uses SQLite files under tmp_path; an unreachable database is a
       path inside a directory that does not exist.

What we test:
    ✅ connect() creates the notes table
    ✅ Sessions are refused before connect()
    ✅ Connection failure raises StoreUnavailableError
    ✅ Startup aborts when the database is unreachable
    ✅ Health endpoint reflects database state
"""

import pytest
from sqlalchemy import inspect

from notes_api.config import Settings
from notes_api.database import Database
from notes_api.exceptions import StoreUnavailableError
from notes_api.main import create_app


@pytest.fixture
def unreachable_settings(tmp_path):
    missing = tmp_path / "missing-dir" / "notes.db"
    return Settings(database_url=f"sqlite+aiosqlite:///{missing}", log_level="WARNING")


class TestDatabase:

    @pytest.mark.asyncio
    async def test_connect_creates_notes_table(self, database):
        async with database.engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        assert "notes" in tables

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, database):
        engine = database.engine
        await database.connect()
        assert database.engine is engine

    @pytest.mark.asyncio
    async def test_session_before_connect_is_unavailable(self, test_settings):
        db = Database(test_settings)
        assert db.is_connected is False

        with pytest.raises(StoreUnavailableError):
            async with db.session():
                pass

    @pytest.mark.asyncio
    async def test_connect_failure_raises_store_unavailable(self, unreachable_settings):
        db = Database(unreachable_settings)

        with pytest.raises(StoreUnavailableError) as exc_info:
            await db.connect()
        assert exc_info.value.context["error_type"] == "OperationalError"
        assert db.is_connected is False

    @pytest.mark.asyncio
    async def test_ping(self, test_settings):
        db = Database(test_settings)
        assert await db.ping() is False

        await db.connect()
        assert await db.ping() is True

        await db.dispose()
        assert await db.ping() is False


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_fails_without_database(self, unreachable_settings):
        app = create_app(unreachable_settings)

        with pytest.raises(StoreUnavailableError):
            async with app.router.lifespan_context(app):
                pass

    @pytest.mark.asyncio
    async def test_shutdown_disposes_engine(self, app):
        async with app.router.lifespan_context(app):
            assert app.state.database.is_connected
        assert not app.state.database.is_connected


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_connected(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_health_disconnected(self, app, test_client):
        await app.state.database.dispose()

        response = await test_client.get("/health")
        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"
