"""Event service layer with business logic."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from datetime import datetime
from uuid import UUID
from zoneinfo import ZoneInfo

import structlog

from core.exceptions import (
    AuthorizationError,
    DomainValidationError,
    EventNotFoundError,
    UserNotFoundError,
)
from domain.entities.event import Event, EventFilters, is_valid_map_link, to_utc_naive
from domain.entities.task import TaskIds
from domain.entities.user import PointsResult
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.points_service import PointsService

logger = structlog.get_logger()

# Marks an optional field left out of a partial update, as opposed to None
UNSET: Any = object()


@dataclass(frozen=True, slots=True)
class AttendanceResult:
    """Outcome of an attendance toggle."""

    attending: bool
    points: PointsResult | None


@dataclass(frozen=True, slots=True)
class UserEvents:
    """Events a user hosts and attends."""

    hosting: list[Event]
    attending: list[Event]


class EventService:
    """Service layer for Event business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        points_service: PointsService,
        timezone: str,
        calendar_start: datetime,
    ) -> None:
        self._uow_factory = uow_factory
        self._points = points_service
        self._tz = ZoneInfo(timezone)
        self._calendar_start = calendar_start

    async def list_events(
        self, filters: EventFilters | None = None, viewer_id: str | None = None
    ) -> list[Event]:
        """List calendar events in start-time order, optionally filtered."""
        async with self._uow_factory() as uow:
            events = await uow.events.list_starting_from(self._calendar_start)

        if filters is None:
            return events  # type: ignore[no-any-return]
        return [e for e in events if filters.matches(e, self._tz, viewer_id)]

    def group_by_day(self, events: list[Event]) -> dict[str, list[Event]]:
        """Group events by local calendar day (YYYY-MM-DD), preserving order."""
        grouped: dict[str, list[Event]] = {}
        for event in events:
            key = event.local_date(self._tz).isoformat()
            grouped.setdefault(key, []).append(event)
        return grouped

    async def get_by_id(self, event_id: UUID, requester_id: str) -> Event:
        """Get an event owned by the requester."""
        async with self._uow_factory() as uow:
            event = await uow.events.get(event_id)
            # Reads are owner-scoped: someone else's event looks absent
            if not event or not event.is_owned_by(requester_id):
                raise EventNotFoundError(str(event_id))
            return event

    async def list_for_user(self, user_id: str) -> UserEvents:
        """Events the user hosts and attends."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if not user:
                raise UserNotFoundError(user_id)
            hosting = await uow.events.list_by_creator(user_id)
            attending = await uow.events.list_attended_by(user_id)
            return UserEvents(hosting=hosting, attending=attending)

    async def create(
        self,
        creator_id: str,
        title: str,
        start_time: datetime,
        end_time: datetime,
        description: str | None = None,
        vibe: str | None = None,
        location_name: str | None = None,
        location: str | None = None,
        is_core: bool = False,
    ) -> Event:
        """Create an event and award CREATE_JAM to its creator.

        The creator becomes the first attendee. CREATE_JAM is awarded on every
        creation, bypassing the completion check.
        """
        self._validate_fields(title=title, location=location)

        async with self._uow_factory() as uow:
            creator = await uow.users.get(creator_id)
            if not creator:
                raise UserNotFoundError(creator_id)

            event = Event(
                creator_id=creator_id,
                title=title,
                description=description,
                vibe=vibe,
                location_name=location_name,
                location=location,
                start_time=to_utc_naive(start_time),
                end_time=to_utc_naive(end_time),
                is_core=is_core,
                attendees=[creator_id],
            )
            created = await uow.events.create(event)

            await self._points.award_in(
                uow, creator_id, TaskIds.CREATE_JAM, check_completion=False
            )

            await uow.commit()

        logger.info("event_created", event_id=str(created.id), creator_id=creator_id)
        return created

    async def update(
        self,
        event_id: UUID,
        requester_id: str,
        title: str | None = None,
        description: str | None = UNSET,
        vibe: str | None = None,
        location_name: str | None = UNSET,
        location: str | None = UNSET,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        is_core: bool | None = None,
    ) -> Event:
        """Update an event's fields. Only the creator may do this.

        ``description``, ``location_name`` and ``location`` are cleared by an
        explicit None and left alone when omitted.
        """
        self._validate_fields(title=title, location=None if location is UNSET else location)

        async with self._uow_factory() as uow:
            event = await self._get_owned(uow, event_id, requester_id)

            if title is not None:
                event.title = title
            if description is not UNSET:
                event.description = description
            if vibe is not None:
                event.vibe = vibe
            if location_name is not UNSET:
                event.location_name = location_name
            if location is not UNSET:
                event.location = location
            if start_time is not None:
                event.start_time = to_utc_naive(start_time)
            if end_time is not None:
                event.end_time = to_utc_naive(end_time)
            if is_core is not None:
                event.is_core = is_core

            event.updated_at = datetime.utcnow()

            updated = await uow.events.update(event)
            await uow.commit()

            return updated  # type: ignore[no-any-return]

    async def delete(self, event_id: UUID, requester_id: str) -> bool:
        """Delete an event. Only the creator may do this."""
        async with self._uow_factory() as uow:
            await self._get_owned(uow, event_id, requester_id)
            deleted = await uow.events.delete(event_id)
            await uow.commit()

        logger.info("event_deleted", event_id=str(event_id), creator_id=requester_id)
        return deleted  # type: ignore[no-any-return]

    async def toggle_attendance(self, event_id: UUID, user_id: str) -> AttendanceResult:
        """Flip the user's attendance and apply the ATTEND_JAM points.

        The attendee list is written first, then the ledger. Both writes share
        one transaction, so a ledger failure leaves attendance unchanged.
        """
        async with self._uow_factory() as uow:
            event = await uow.events.get(event_id)
            if not event:
                raise EventNotFoundError(str(event_id))

            was_attending = event.toggle_attendee(user_id)
            await uow.events.update(event)

            points: PointsResult | None
            if was_attending:
                points = await self._points.deduct_in(uow, user_id, TaskIds.ATTEND_JAM)
            else:
                points = await self._points.award_in(uow, user_id, TaskIds.ATTEND_JAM)

            await uow.commit()

        logger.info(
            "attendance_toggled",
            event_id=str(event_id),
            user_id=user_id,
            attending=not was_attending,
        )
        return AttendanceResult(attending=not was_attending, points=points)

    async def _get_owned(self, uow: IUnitOfWork, event_id: UUID, requester_id: str) -> Event:
        event = await uow.events.get(event_id)
        if not event:
            raise EventNotFoundError(str(event_id))
        if not event.is_owned_by(requester_id):
            raise AuthorizationError("Only the event creator can modify this event")
        return event

    @staticmethod
    def _validate_fields(title: str | None, location: str | None) -> None:
        if title is not None and not title.strip():
            raise DomainValidationError("Title is required", field="title")
        if location and not is_valid_map_link(location):
            raise DomainValidationError("Please enter a valid Google Maps link", field="location")
