"""SQLAlchemy implementation of Event repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConcurrentUpdateError
from domain.entities.event import Event
from infrastructure.database.models import EventModel


class SQLAlchemyEventRepository:
    """SQLAlchemy implementation of IEventRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Event | None:
        """Get an event by ID."""
        stmt = select(EventModel).where(EventModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_starting_from(self, start: datetime) -> list[Event]:
        """Get all events starting at or after ``start``."""
        stmt = (
            select(EventModel)
            .where(EventModel.start_time >= start)
            .order_by(EventModel.start_time, EventModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_by_creator(self, creator_id: str) -> list[Event]:
        """Get all events created by a user."""
        stmt = (
            select(EventModel)
            .where(EventModel.creator_id == creator_id)
            .order_by(EventModel.start_time)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_attended_by(self, user_id: str) -> list[Event]:
        """Get all events a user attends."""
        # Attendee lists are JSON arrays; membership is checked in Python so
        # the query stays portable between PostgreSQL and SQLite.
        stmt = select(EventModel).order_by(EventModel.start_time)
        result = await self._session.execute(stmt)
        return [
            self._to_entity(model)
            for model in result.scalars()
            if user_id in (model.attendees or [])
        ]

    async def create(self, event: Event) -> Event:
        """Create a new event."""
        model = self._to_model(event)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, event: Event) -> Event:
        """Update an event if its row version is unchanged."""
        stmt = (
            update(EventModel)
            .where(EventModel.id == event.id, EventModel.version == event.version)
            .values(
                title=event.title,
                description=event.description,
                vibe=event.vibe,
                location_name=event.location_name,
                location=event.location,
                start_time=event.start_time,
                end_time=event.end_time,
                is_core=event.is_core,
                attendees=list(event.attendees),
                version=event.version + 1,
                updated_at=event.updated_at,
            )
            .execution_options(synchronize_session="evaluate")
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise ConcurrentUpdateError("event", str(event.id))

        event.version += 1
        return event

    async def delete(self, id: UUID) -> bool:
        """Delete an event."""
        stmt = select(EventModel).where(EventModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: EventModel) -> Event:
        """Convert ORM model to domain entity."""
        return Event(
            id=model.id,
            creator_id=model.creator_id,
            title=model.title,
            description=model.description,
            vibe=model.vibe,
            location_name=model.location_name,
            location=model.location,
            start_time=model.start_time,
            end_time=model.end_time,
            is_core=model.is_core,
            attendees=list(model.attendees or []),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Event) -> EventModel:
        """Convert domain entity to ORM model."""
        return EventModel(
            id=entity.id,
            creator_id=entity.creator_id,
            title=entity.title,
            description=entity.description,
            vibe=entity.vibe,
            location_name=entity.location_name,
            location=entity.location,
            start_time=entity.start_time,
            end_time=entity.end_time,
            is_core=entity.is_core,
            attendees=list(entity.attendees),
            version=entity.version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
