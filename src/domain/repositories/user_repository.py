"""User repository protocol."""

from typing import Protocol

from domain.entities.user import User


class IUserRepository(Protocol):
    """Repository interface for User entities."""

    async def get(self, id: str) -> User | None:
        """Get a user by auth subject id."""
        ...

    async def get_by_display_name(self, display_name: str) -> User | None:
        """Get a user by display name."""
        ...

    async def list_by_points(self, limit: int = 50, offset: int = 0) -> list[User]:
        """List users ordered by point total, highest first."""
        ...

    async def create(self, user: User) -> User:
        """Create a new user."""
        ...

    async def update_profile(self, user: User) -> User:
        """Persist profile fields (display name, bio, vibes, avatar, timezone)."""
        ...

    async def update_ledger(self, user: User) -> User:
        """Persist num_points and completed_tasks.

        The write is conditional on ``user.version`` still matching the stored
        row and increments it. Raises ConcurrentUpdateError on mismatch.
        """
        ...
