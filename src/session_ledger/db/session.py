"""Database engine and session management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """Own the engine and session factory for one application instance."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        engine = create_async_engine(
            settings.database_url,
            echo=settings.db_echo,
            pool_pre_ping=True,
        )
        return cls(engine)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield an ``AsyncSession`` for request-scoped work."""
        async with self._session_maker() as session:
            yield session

    async def create_all(self) -> None:
        """Create all tables (local development and tests)."""
        async with self._engine.begin() as connection:
            await connection.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["Database"]
