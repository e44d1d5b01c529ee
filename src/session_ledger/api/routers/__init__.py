"""Router registrations for the ledger service."""

from __future__ import annotations

from fastapi import APIRouter

from .health import router as health_router
from .transactions import router as transactions_router

api_router = APIRouter()
api_router.include_router(transactions_router)

__all__ = ["api_router", "health_router", "transactions_router"]
