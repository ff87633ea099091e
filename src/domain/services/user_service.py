"""User profile service layer."""

from collections.abc import Callable
from datetime import datetime

import structlog

from core.exceptions import DisplayNameTakenError, DomainValidationError, UserNotFoundError
from domain.entities.task import TaskIds
from domain.entities.user import (
    MAX_VIBES,
    User,
    invalid_vibes,
    is_valid_display_name,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.points_service import PointsService

logger = structlog.get_logger()


class UserService:
    """Service layer for user profiles and the directory."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        points_service: PointsService,
    ) -> None:
        self._uow_factory = uow_factory
        self._points = points_service

    async def get_or_create(self, user_id: str) -> User:
        """Return the caller's record, creating an empty one on first sign-in."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if user:
                return user

            created = await uow.users.create(User(id=user_id))
            await uow.commit()

        logger.info("user_created", user_id=user_id)
        return created  # type: ignore[no-any-return]

    async def get_public_profile(self, user_id: str) -> User:
        """Get another user's profile."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(user_id)
            return user

    async def list_directory(self, limit: int = 50, offset: int = 0) -> list[User]:
        """Users ordered by points, highest first."""
        async with self._uow_factory() as uow:
            return await uow.users.list_by_points(limit=limit, offset=offset)  # type: ignore[no-any-return]

    async def update_profile(
        self,
        user_id: str,
        display_name: str | None = None,
        bio: str | None = None,
        vibes: list[str] | None = None,
        avatar_url: str | None = None,
        timezone: str | None = None,
    ) -> User:
        """Update profile fields.

        Setting a display name for the first time completes onboarding and
        awards SIGN_UP (once).
        """
        if display_name is not None and not is_valid_display_name(display_name):
            raise DomainValidationError(
                "Display name can only contain lowercase letters, numbers, and underscores",
                field="display_name",
            )
        if vibes is not None:
            self._validate_vibes(vibes)

        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(user_id)

            was_onboarded = user.is_onboarded

            if display_name is not None and display_name != user.display_name:
                existing = await uow.users.get_by_display_name(display_name)
                if existing and existing.id != user_id:
                    raise DisplayNameTakenError(display_name)
                user.display_name = display_name
            if bio is not None:
                user.bio = bio
            if vibes is not None:
                user.vibes = list(vibes)
            if avatar_url is not None:
                user.avatar_url = avatar_url
            if timezone is not None:
                user.timezone = timezone

            user.updated_at = datetime.utcnow()
            updated = await uow.users.update_profile(user)

            if not was_onboarded and updated.is_onboarded:
                if await self._points.award_in(uow, user_id, TaskIds.SIGN_UP):
                    updated = await uow.users.get(user_id) or updated
                logger.info("user_onboarded", user_id=user_id)

            await uow.commit()
            return updated  # type: ignore[no-any-return]

    @staticmethod
    def _validate_vibes(vibes: list[str]) -> None:
        if len(vibes) > MAX_VIBES:
            raise DomainValidationError(f"Pick at most {MAX_VIBES} vibes", field="vibes")
        if len(set(vibes)) != len(vibes):
            raise DomainValidationError("Vibes must be unique", field="vibes")
        unknown = invalid_vibes(vibes)
        if unknown:
            raise DomainValidationError(f"Unknown vibes: {', '.join(unknown)}", field="vibes")
