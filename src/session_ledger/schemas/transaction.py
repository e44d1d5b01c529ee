"""Transaction-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models import TransactionType

TRANSACTION_NOT_FOUND = "Transaction not found"

# Keeps any realistic per-session sum far from float overflow.
MAX_TRANSACTION_AMOUNT = 1_000_000_000_000.0

TRANSACTION_READ_EXAMPLE = {
    "id": "4f7c2b8e-2f0a-4a1b-9a8e-0d6c5e3b7a11",
    "title": "Freelance invoice",
    "amount": 5000.0,
    "session_id": "a0c1f6f4-3e5d-4d7b-8a64-1b2f0a9c8d7e",
    "created_at": "2024-01-01T12:00:00Z",
}


class TransactionCreate(BaseModel):
    """Validated payload for recording a new transaction."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "title": "Freelance invoice",
                "amount": 5000,
                "type": TransactionType.CREDIT.value,
            }
        },
    )

    title: str
    amount: float = Field(gt=0, le=MAX_TRANSACTION_AMOUNT, strict=True, allow_inf_nan=False)
    type: TransactionType


class TransactionRead(BaseModel):
    """Public representation of a transaction."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TRANSACTION_READ_EXAMPLE},
    )

    id: str
    title: str
    amount: float
    session_id: str
    created_at: datetime | None = None


class TransactionListResponse(BaseModel):
    transactions: list[TransactionRead]


class TransactionResponse(BaseModel):
    transaction: TransactionRead


class TransactionNotFoundResponse(BaseModel):
    """Body returned with a 200 status when no matching row exists."""

    error: str = Field(default=TRANSACTION_NOT_FOUND)


class SummaryAmount(BaseModel):
    amount: float = Field(description="Net balance: credits minus debits")


class SummaryResponse(BaseModel):
    """Net balance for the caller's session."""

    model_config = ConfigDict(json_schema_extra={"example": {"summary": {"amount": 70.0}}})

    summary: SummaryAmount


__all__ = [
    "MAX_TRANSACTION_AMOUNT",
    "TRANSACTION_NOT_FOUND",
    "SummaryAmount",
    "SummaryResponse",
    "TransactionCreate",
    "TransactionListResponse",
    "TransactionNotFoundResponse",
    "TransactionRead",
    "TransactionResponse",
]
