"""Service layer encapsulating ledger operations."""

from __future__ import annotations

import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Transaction, new_transaction_id
from ..repositories import TransactionRepository
from ..schemas import TransactionCreate

logger = logging.getLogger(__name__)


class TransactionService:
    """High-level orchestration for ``Transaction`` entries of one session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = TransactionRepository(session)

    @property
    def repository(self) -> TransactionRepository:
        return self._repository

    async def list_transactions(self, session_id: str) -> list[Transaction]:
        """Return every transaction recorded under ``session_id``."""
        transactions = await self._repository.list_for_session(session_id)
        logger.debug("Listed transactions", extra={"count": len(transactions)})
        return transactions

    async def get_transaction(self, transaction_id: str, session_id: str) -> Transaction | None:
        """Return the transaction only if it belongs to ``session_id``."""
        return await self._repository.get_for_session(transaction_id, session_id)

    async def get_summary(self, session_id: str) -> float:
        """Return the net balance (credits minus debits); zero for an empty session."""
        total = await self._repository.sum_amount_for_session(session_id)
        if total is None:
            return 0.0
        return total

    async def create_transaction(self, payload: TransactionCreate, session_id: str) -> Transaction:
        """Persist a new entry, storing debits as negative amounts."""
        transaction = Transaction(
            id=new_transaction_id(),
            title=payload.title,
            amount=payload.type.signed(payload.amount),
            session_id=session_id,
        )
        await self._repository.add(transaction)
        await self._session.commit()
        logger.info(
            "Transaction recorded",
            extra={"transaction_id": transaction.id, "type": payload.type.value},
        )
        return transaction
