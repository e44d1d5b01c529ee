"""Domain service layer package."""

from __future__ import annotations

from .transactions import TransactionService

__all__ = ["TransactionService"]
