"""SQLAlchemy implementation of User repository."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConcurrentUpdateError
from domain.entities.user import User
from infrastructure.database.models import UserModel


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: str) -> User | None:
        """Get a user by auth subject id."""
        stmt = select(UserModel).where(UserModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_display_name(self, display_name: str) -> User | None:
        """Get a user by display name."""
        stmt = select(UserModel).where(UserModel.display_name == display_name)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_by_points(self, limit: int = 50, offset: int = 0) -> list[User]:
        """List onboarded users ordered by points, highest first."""
        stmt = (
            select(UserModel)
            .where(UserModel.display_name.is_not(None))
            .order_by(UserModel.num_points.desc(), UserModel.display_name)
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, user: User) -> User:
        """Create a new user."""
        model = self._to_model(user)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update_profile(self, user: User) -> User:
        """Update profile fields. Ledger fields are left alone."""
        stmt = select(UserModel).where(UserModel.id == user.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"User {user.id} not found")

        model.display_name = user.display_name
        model.bio = user.bio
        model.vibes = list(user.vibes)
        model.avatar_url = user.avatar_url
        model.timezone = user.timezone
        model.updated_at = user.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def update_ledger(self, user: User) -> User:
        """Write points and completed tasks if the row version is unchanged."""
        stmt = (
            update(UserModel)
            .where(UserModel.id == user.id, UserModel.version == user.version)
            .values(
                num_points=user.num_points,
                completed_tasks=list(user.completed_tasks),
                version=user.version + 1,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session="evaluate")
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise ConcurrentUpdateError("user", user.id)

        user.version += 1
        return user

    def _to_entity(self, model: UserModel) -> User:
        """Convert ORM model to domain entity."""
        return User(
            id=model.id,
            display_name=model.display_name,
            bio=model.bio,
            vibes=list(model.vibes or []),
            avatar_url=model.avatar_url,
            timezone=model.timezone,
            num_points=model.num_points or 0,
            completed_tasks=list(model.completed_tasks or []),
            version=model.version,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: User) -> UserModel:
        """Convert domain entity to ORM model."""
        return UserModel(
            id=entity.id,
            display_name=entity.display_name,
            bio=entity.bio,
            vibes=list(entity.vibes),
            avatar_url=entity.avatar_url,
            timezone=entity.timezone,
            num_points=entity.num_points,
            completed_tasks=list(entity.completed_tasks),
            version=entity.version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
