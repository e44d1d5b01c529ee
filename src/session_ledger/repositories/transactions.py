"""Repository for interacting with transaction persistence models."""

from __future__ import annotations

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Transaction
from .base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Concrete repository encapsulating ``Transaction`` persistence operations.

    Every read is partitioned by ``session_id``; there are no cross-session
    queries and no update or delete operations.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_for_session(self, session_id: str) -> list[Transaction]:
        """Return all transactions recorded under the given session."""
        result = await self.session.execute(
            select(Transaction).where(Transaction.session_id == session_id)
        )
        return list(result.scalars().all())

    async def get_for_session(self, transaction_id: str, session_id: str) -> Transaction | None:
        """Retrieve a transaction by ID ensuring it belongs to the session."""
        result = await self.session.execute(
            select(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.session_id == session_id,
            )
        )
        return result.scalars().first()

    async def sum_amount_for_session(self, session_id: str) -> float | None:
        """Return the sum of ``amount`` for the session, ``None`` when it has no rows."""
        result = await self.session.execute(
            select(func.sum(Transaction.amount)).where(Transaction.session_id == session_id)
        )
        total = result.scalar_one_or_none()
        if total is None:
            return None
        return float(total)
