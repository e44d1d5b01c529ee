"""Base repository implementation supporting asynchronous SQLModel sessions."""

from __future__ import annotations

from typing import Generic, TypeVar

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Hold the unit-of-work session shared by a repository's queries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def add(self, instance: ModelType) -> ModelType:
        """Add and flush a new entity instance."""
        self._session.add(instance)
        await self._session.flush()
        return instance
