"""Transaction ledger models built with SQLModel."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def new_transaction_id() -> str:
    return str(uuid.uuid4())


class TransactionType(str, Enum):
    """Direction of a ledger entry; only its effect on the sign is stored."""

    CREDIT = "credit"
    DEBIT = "debit"

    def signed(self, amount: float) -> float:
        """Return ``amount`` with the sign this direction implies."""
        return amount if self is TransactionType.CREDIT else amount * -1


class TransactionBase(SQLModel, table=False):
    """Shared attributes for transaction models."""

    title: str = Field(sa_column=sa.Column(sa.Text(), nullable=False))
    amount: float = Field(sa_column=sa.Column(sa.Float(), nullable=False))
    session_id: str = Field(sa_column=sa.Column(sa.String(length=64), nullable=False))


class Transaction(TransactionBase, table=True):
    """Persistent, immutable ledger entry."""

    __tablename__ = "transactions"
    __table_args__ = (sa.Index("ix_transactions_session_id", "session_id"),)

    id: str = Field(
        default_factory=new_transaction_id,
        sa_column=sa.Column(sa.String(length=36), primary_key=True),
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now()},
    )


__all__ = ["Transaction", "TransactionBase", "TransactionType", "new_transaction_id", "utcnow"]
