"""
Notes API — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches storage gets its own SQLite file database
       under pytest's tmp_path, so tests never share state.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:    Settings pointing at a fresh SQLite file
    ├── database:         Connected Database handle (disposed afterwards)
    ├── note_service:     NoteService over that handle
    ├── app:              FastAPI app built from test_settings
    ├── test_client:      HTTPX AsyncClient running the app's lifespan
    └── mock_db_session:  AsyncMock session for failure-path tests
"""

import os

# Override settings for testing BEFORE any notes_api imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from notes_api.config import Settings
from notes_api.database import Database
from notes_api.main import create_app
from notes_api.services.note_service import NoteService


@pytest.fixture
def test_settings(tmp_path):
    """Settings for an isolated SQLite database file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database(test_settings)
    await db.connect()
    yield db
    await db.dispose()


@pytest.fixture
def note_service(database):
    return NoteService(database)


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not send lifespan events, so the app's lifespan is
    entered explicitly; it connects the database exactly as in production.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/notes")
            assert response.status_code == 200
    """
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def mock_db_session():
    """
    A mock async session for simulating driver failures.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        service = NoteService(mock_database(mock_db_session))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_database(mock_db_session):
    """A Database stand-in whose session() yields mock_db_session."""

    @asynccontextmanager
    async def session():
        yield mock_db_session

    db = MagicMock(spec=Database)
    db.session = session
    return db
