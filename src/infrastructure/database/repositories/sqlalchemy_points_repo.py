"""SQLAlchemy implementation of the points transaction repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.points import PointTransaction
from infrastructure.database.models import PointTransactionModel


class SQLAlchemyPointTransactionRepository:
    """SQLAlchemy implementation of IPointTransactionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, transaction: PointTransaction) -> PointTransaction:
        """Append a transaction."""
        model = self._to_model(transaction)
        self._session.add(model)
        await self._session.flush()
        return transaction

    async def list_for_user(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[PointTransaction]:
        """Get a user's transactions, newest first."""
        stmt = (
            select(PointTransactionModel)
            .where(PointTransactionModel.user_id == user_id)
            .order_by(PointTransactionModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: PointTransactionModel) -> PointTransaction:
        """Convert ORM model to domain entity."""
        return PointTransaction(
            id=model.id,
            user_id=model.user_id,
            task_id=model.task_id,
            points_delta=model.points_delta,
            balance_after=model.balance_after,
            created_at=model.created_at,
        )

    def _to_model(self, entity: PointTransaction) -> PointTransactionModel:
        """Convert domain entity to ORM model."""
        return PointTransactionModel(
            id=entity.id,
            user_id=entity.user_id,
            task_id=entity.task_id,
            points_delta=entity.points_delta,
            balance_after=entity.balance_after,
            created_at=entity.created_at,
        )
