"""
Notes API — Database Handle
=============================

What:  Async SQLAlchemy engine, session factory, and declarative base.
How:   A `Database` object is constructed by the application factory,
       connected once in the lifespan handler, and handed to the storage
       accessor. Nothing here opens a connection at import time.
Who:   Owned by the FastAPI app (`app.state.database`); used by NoteService
       and the health check.

Connection Pooling (server databases only):
    pool_size:        Persistent connections for normal load
    max_overflow:     Temporary connections for traffic spikes
    pool_pre_ping:    Validates connections before use
    pool_recycle=3600: Recycles connections every hour
SQLite URLs keep the driver's default pool, which rejects these arguments.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_api.config import Settings
from notes_api.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object so `Database.connect()` can create the
    notes table.
    """
    pass


class Database:
    """
    Explicitly constructed handle around the async engine.

    Lifecycle:
        db = Database(settings)   # no I/O
        await db.connect()        # engine + SELECT 1 + create tables
        async with db.session() as session: ...
        await db.dispose()        # close pooled connections
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self._session_factory is not None

    def _engine_options(self) -> dict:
        options = {"echo": self.settings.log_level == "DEBUG"}
        if not self.settings.is_sqlite:
            options.update(
                pool_size=self.settings.db_pool_size,
                max_overflow=self.settings.db_max_overflow,
                pool_pre_ping=self.settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return options

    async def connect(self) -> None:
        """
        Create the engine, verify connectivity and ensure the schema exists.

        Raises:
            StoreUnavailableError: the database could not be reached or
                initialized. Callers at startup treat this as fatal.
        """
        if self.is_connected:
            return

        engine = create_async_engine(self.settings.database_url, **self._engine_options())
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                if self.settings.create_tables:
                    # Import registers the Note mapper on Base.metadata
                    from notes_api.models import note  # noqa: F401

                    await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise StoreUnavailableError(
                message="Could not connect to the database",
                context={"error": str(e), "error_type": type(e).__name__},
            ) from e

        self.engine = engine
        # expire_on_commit=False: returned objects stay readable after commit
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session for one unit of work.

        The caller commits explicitly. On any exception the transaction is
        rolled back and the exception re-raised; the session is always closed.
        """
        if self._session_factory is None:
            raise StoreUnavailableError(message="The database is not connected")

        async with self._session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def ping(self) -> bool:
        """Return True when the database answers a trivial query."""
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self._session_factory = None
