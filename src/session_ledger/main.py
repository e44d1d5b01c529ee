"""Entry point for the ledger FastAPI application."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routers import api_router, health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .core.middleware import CorrelationIdMiddleware
from .db import Database
from .errors import register_exception_handlers


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Instantiate and configure the FastAPI application.

    The storage handle is owned by the returned application: it is created
    from ``settings`` unless one is supplied, and disposed on shutdown.
    """

    settings = settings or get_settings()
    configure_logging(settings)
    database = database or Database.from_settings(settings)

    router_prefix = settings.router_prefix
    openapi_url = "/openapi.json" if not router_prefix else f"{router_prefix}/openapi.json"

    @asynccontextmanager
    async def lifespan(application: FastAPI) -> AsyncIterator[None]:
        if settings.db_create_all:
            await database.create_all()
        try:
            yield
        finally:
            await database.dispose()

    application = FastAPI(
        title=settings.project_name,
        version=settings.version,
        summary="Session-scoped credit/debit ledger.",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=openapi_url,
        lifespan=lifespan,
    )

    application.state.settings = settings
    application.state.database = database

    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    if router_prefix:
        application.include_router(api_router, prefix=router_prefix)
    else:
        application.include_router(api_router)

    application.include_router(health_router)

    register_exception_handlers(application)

    return application


app = create_app()


def run() -> None:
    """Console entry point for ``session-ledger``."""

    settings: Settings = get_settings()
    uvicorn.run(
        "session_ledger.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.reload,
        log_config=None,
    )
