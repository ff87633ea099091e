"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.user import User


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.users = AsyncMock()
        self.events = AsyncMock()
        self.points = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    uow = FakeUnitOfWork()
    # Ledger writes echo the entity back, like the real repository
    uow.users.update_ledger.side_effect = lambda user: user
    return uow


@pytest.fixture
def user_id() -> str:
    """An auth subject id."""
    return "did:privy:alice"


@pytest.fixture
def other_id() -> str:
    """A second subject id (distinct from user_id)."""
    return "did:privy:bob"


@pytest.fixture
def user(user_id: str) -> User:
    """An onboarded user with no points."""
    return User(id=user_id, display_name="alice")
