"""Async database engine and session management.

The engine and session factory are owned by a ``Database`` instance
created when the application starts and disposed when it stops.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from noisewatch.core.config import Settings
from noisewatch.models import Base


def _engine_options(settings: Settings) -> dict[str, Any]:
    url = settings.SQLALCHEMY_DATABASE_URI
    if url.startswith("sqlite"):
        # One shared connection so in-memory databases survive across sessions
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    }


class Database:
    """Owns the async engine and hands out sessions.

    Attributes:
        engine: SQLAlchemy async engine (connection pool).
        session_factory: Factory producing ``AsyncSession`` objects.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create a database handle from application settings.

        Args:
            settings: Application settings.

        Returns:
            Database bound to a new engine.
        """
        engine = create_async_engine(
            settings.SQLALCHEMY_DATABASE_URI,
            echo=settings.DEBUG,
            **_engine_options(settings),
        )
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Provide a session that is rolled back on error and always closed.

        Yields:
            AsyncSession: SQLAlchemy async session for database operations.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema created")

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
