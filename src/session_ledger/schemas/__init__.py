"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .system import ErrorResponse, HealthCheckResponse, RootResponse
from .transaction import (
    MAX_TRANSACTION_AMOUNT,
    TRANSACTION_NOT_FOUND,
    SummaryAmount,
    SummaryResponse,
    TransactionCreate,
    TransactionListResponse,
    TransactionNotFoundResponse,
    TransactionRead,
    TransactionResponse,
)

__all__ = [
    "MAX_TRANSACTION_AMOUNT",
    "TRANSACTION_NOT_FOUND",
    "ErrorResponse",
    "HealthCheckResponse",
    "RootResponse",
    "SummaryAmount",
    "SummaryResponse",
    "TransactionCreate",
    "TransactionListResponse",
    "TransactionNotFoundResponse",
    "TransactionRead",
    "TransactionResponse",
]
