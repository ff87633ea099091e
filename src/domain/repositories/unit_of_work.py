"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.event_repository import IEventRepository
from domain.repositories.points_repository import IPointTransactionRepository
from domain.repositories.user_repository import IUserRepository


class IUnitOfWork(Protocol):
    """One transaction spanning the user, event and ledger repositories.

    Ledger writes and the attendance or event write that caused them commit
    together or not at all.
    """

    users: IUserRepository
    events: IEventRepository
    points: IPointTransactionRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
