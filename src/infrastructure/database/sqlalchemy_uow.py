"""SQLAlchemy Unit of Work implementation."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.repositories.sqlalchemy_event_repo import SQLAlchemyEventRepository
from infrastructure.database.repositories.sqlalchemy_points_repo import (
    SQLAlchemyPointTransactionRepository,
)
from infrastructure.database.repositories.sqlalchemy_user_repo import SQLAlchemyUserRepository


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    All repositories share one session, so everything written between
    ``__aenter__`` and ``commit`` lands in a single transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if not self._session:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def users(self) -> SQLAlchemyUserRepository:
        """Get user repository."""
        return SQLAlchemyUserRepository(self._require_session())

    @property
    def events(self) -> SQLAlchemyEventRepository:
        """Get event repository."""
        return SQLAlchemyEventRepository(self._require_session())

    @property
    def points(self) -> SQLAlchemyPointTransactionRepository:
        """Get points transaction repository."""
        return SQLAlchemyPointTransactionRepository(self._require_session())

    async def commit(self) -> None:
        """Commit the current transaction."""
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        """Enter the context manager and create session."""
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Any,
    ) -> None:
        """Exit the context manager, rolling back anything uncommitted."""
        if self._session:
            if exc_type:
                await self.rollback()
            await self._session.close()
            self._session = None
