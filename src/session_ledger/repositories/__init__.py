"""Database repositories for encapsulating persistence logic."""

from __future__ import annotations

from .transactions import TransactionRepository

__all__ = ["TransactionRepository"]
