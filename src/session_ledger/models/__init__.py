"""Persistence models for the ledger service."""

from __future__ import annotations

from .transaction import Transaction, TransactionBase, TransactionType, new_transaction_id, utcnow

__all__ = ["Transaction", "TransactionBase", "TransactionType", "new_transaction_id", "utcnow"]
