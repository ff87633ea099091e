"""Points ledger service."""

from collections.abc import Callable

import structlog

from core.exceptions import UserNotFoundError
from domain.entities.points import PointTransaction
from domain.entities.task import get_task
from domain.entities.user import PointsResult
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class PointsService:
    """Awards and deducts task points against a user's ledger.

    ``award_points``/``deduct_points`` open their own transaction.
    ``award_in``/``deduct_in`` join a transaction the caller already holds
    (the caller commits), so a ledger mutation can be atomic with another
    write such as an attendance change.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def award_points(
        self, user_id: str, task_id: str, check_completion: bool = True
    ) -> PointsResult | None:
        """Award a task's points. Returns None if the task was already completed."""
        async with self._uow_factory() as uow:
            result = await self.award_in(uow, user_id, task_id, check_completion)
            await uow.commit()
            return result

    async def deduct_points(self, user_id: str, task_id: str) -> PointsResult:
        """Deduct a task's points, never going below zero.

        The result carries the task's nominal delta. The ledger entry records
        the amount actually removed.
        """
        async with self._uow_factory() as uow:
            result = await self.deduct_in(uow, user_id, task_id)
            await uow.commit()
            return result

    async def award_in(
        self,
        uow: IUnitOfWork,
        user_id: str,
        task_id: str,
        check_completion: bool = True,
    ) -> PointsResult | None:
        task = get_task(task_id)
        user = await uow.users.get(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        result = user.award(task, check_completion=check_completion)
        if result is None:
            logger.info("points_award_skipped", user_id=user_id, task_id=task_id)
            return None

        await uow.users.update_ledger(user)
        await uow.points.add(
            PointTransaction(
                user_id=user_id,
                task_id=task_id,
                points_delta=result.points_delta,
                balance_after=result.new_total,
            )
        )
        logger.info(
            "points_awarded",
            user_id=user_id,
            task_id=task_id,
            points=result.points_delta,
            total=result.new_total,
        )
        return result

    async def deduct_in(self, uow: IUnitOfWork, user_id: str, task_id: str) -> PointsResult:
        task = get_task(task_id)
        user = await uow.users.get(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        balance_before = user.num_points
        result = user.deduct(task)
        await uow.users.update_ledger(user)
        # The log records what was actually removed so it folds to num_points
        await uow.points.add(
            PointTransaction(
                user_id=user_id,
                task_id=task_id,
                points_delta=result.new_total - balance_before,
                balance_after=result.new_total,
            )
        )
        logger.info(
            "points_deducted",
            user_id=user_id,
            task_id=task_id,
            points=result.points_delta,
            applied=result.new_total - balance_before,
            total=result.new_total,
        )
        return result

    async def get_history(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> list[PointTransaction]:
        """Get a user's points history, newest first."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(user_id)
            return await uow.points.list_for_user(user_id, limit=limit, offset=offset)  # type: ignore[no-any-return]
