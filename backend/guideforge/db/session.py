"""Database engine and session configuration."""

from collections.abc import AsyncGenerator
from typing import Any

import structlog
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

# Register all models with SQLAlchemy (required for relationship resolution)
import guideforge.models  # noqa: F401

logger = structlog.get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the async engine and session factory for one process.

    Created at application startup and disposed at shutdown; components
    receive sessions from it instead of reaching for a global engine.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        engine_kwargs: dict[str, Any] = {"echo": echo, "future": True}
        if not url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=5,
                max_overflow=10,
                pool_pre_ping=True,  # Verify connections before use
                pool_recycle=300,  # Recycle connections after 5 minutes
            )
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def init_models(self) -> None:
        """Create all tables. Used for SQLite/local runs; PostgreSQL uses Alembic."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables created")

    async def dispose(self) -> None:
        """Dispose of the engine and release all connections.

        Should be called during application shutdown.
        """
        await self.engine.dispose()


async def get_session(request: Request) -> AsyncGenerator[AsyncSession]:
    """Dependency that provides an async database session."""
    database: Database = request.app.state.database
    async with database.session_maker() as session:
        yield session
