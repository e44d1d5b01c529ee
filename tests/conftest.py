from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from session_ledger.core.config import Settings
from session_ledger.db import Database
from session_ledger.main import create_app

ClientFactory = Callable[[], Awaitable[AsyncClient]]


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", db_create_all=False)


@pytest_asyncio.fixture
async def database() -> AsyncIterator[Database]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(engine)
    await database.create_all()
    try:
        yield database
    finally:
        await database.dispose()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    async with database.session() as session:
        yield session


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    return create_app(settings=settings, database=database)


@pytest_asyncio.fixture
async def client_factory(app: FastAPI) -> AsyncIterator[ClientFactory]:
    """Build independent clients; each one keeps its own cookie jar, i.e. its own session."""

    clients: list[AsyncClient] = []

    async def _factory() -> AsyncClient:
        http_client = AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")
        clients.append(http_client)
        return http_client

    try:
        yield _factory
    finally:
        for http_client in clients:
            await http_client.aclose()


@pytest_asyncio.fixture
async def client(client_factory: ClientFactory) -> AsyncClient:
    return await client_factory()
