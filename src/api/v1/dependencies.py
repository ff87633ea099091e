"""Dependency injection factories for API v1."""

from datetime import datetime, time, timezone
from functools import lru_cache
from typing import Annotated, Callable
from zoneinfo import ZoneInfo

from fastapi import Depends

from api.dependencies.auth import CurrentUser
from core.config import settings
from domain.entities.user import User
from domain.services.event_service import EventService
from domain.services.points_service import PointsService
from domain.services.task_service import TaskService
from domain.services.user_service import UserService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.storage.provider import IObjectStorage
from infrastructure.storage.supabase_storage import SupabaseStorage
from infrastructure.vision.openai_classifier import OpenAIImageClassifier
from infrastructure.vision.provider import IImageClassifier


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


def calendar_start() -> datetime:
    """Local midnight of the calendar start date, as naive UTC."""
    local_midnight = datetime.combine(
        settings.calendar_start_date, time.min, tzinfo=ZoneInfo(settings.event_timezone)
    )
    return local_midnight.astimezone(timezone.utc).replace(tzinfo=None)


@lru_cache
def get_points_service() -> PointsService:
    """Get Points service instance."""
    return PointsService(get_uow_factory())


@lru_cache
def get_event_service() -> EventService:
    """Get Event service instance."""
    return EventService(
        get_uow_factory(),
        points_service=get_points_service(),
        timezone=settings.event_timezone,
        calendar_start=calendar_start(),
    )


@lru_cache
def get_user_service() -> UserService:
    """Get User service instance."""
    return UserService(get_uow_factory(), points_service=get_points_service())


@lru_cache
def get_storage() -> IObjectStorage:
    """Get object storage client."""
    return SupabaseStorage()


@lru_cache
def get_classifier() -> IImageClassifier:
    """Get image classifier."""
    return OpenAIImageClassifier()


@lru_cache
def get_task_service() -> TaskService:
    """Get Task service instance."""
    return TaskService(
        get_uow_factory(),
        points_service=get_points_service(),
        storage=get_storage(),
        classifier=get_classifier(),
        max_upload_bytes=settings.max_upload_bytes,
    )


async def get_account(
    user: CurrentUser,
    service: UserService = Depends(get_user_service),
) -> User:
    """The caller's user record, created on first authenticated request."""
    return await service.get_or_create(user.id)


Account = Annotated[User, Depends(get_account)]
