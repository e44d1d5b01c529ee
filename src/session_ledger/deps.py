"""Reusable FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings
from .db import Database


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""

    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Return the storage handle owned by the running application."""

    return request.app.state.database


async def get_db_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a request-scoped database session."""

    async with database.session() as session:
        yield session


SettingsDependency = Annotated[Settings, Depends(get_app_settings)]
DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]


__all__ = [
    "DatabaseSessionDependency",
    "SettingsDependency",
    "get_app_settings",
    "get_database",
    "get_db_session",
]
