"""Point transaction repository protocol."""

from typing import Protocol

from domain.entities.points import PointTransaction


class IPointTransactionRepository(Protocol):
    """Repository interface for the append-only points log."""

    async def add(self, transaction: PointTransaction) -> PointTransaction:
        """Append a transaction."""
        ...

    async def list_for_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[PointTransaction]:
        """Get a user's transactions, newest first."""
        ...
