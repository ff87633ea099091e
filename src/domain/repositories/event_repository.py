"""Event repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.event import Event


class IEventRepository(Protocol):
    """Repository interface for Event entities."""

    async def get(self, id: UUID) -> Event | None:
        """Get an event by ID."""
        ...

    async def list_starting_from(self, start: datetime) -> list[Event]:
        """Get all events starting at or after ``start``, ordered by start time."""
        ...

    async def list_by_creator(self, creator_id: str) -> list[Event]:
        """Get all events created by a user, ordered by start time."""
        ...

    async def list_attended_by(self, user_id: str) -> list[Event]:
        """Get all events a user attends, ordered by start time."""
        ...

    async def create(self, event: Event) -> Event:
        """Create a new event."""
        ...

    async def update(self, event: Event) -> Event:
        """Update an event. Conditional on ``event.version``, which is incremented.

        Raises ConcurrentUpdateError on version mismatch.
        """
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete an event and return success status."""
        ...
