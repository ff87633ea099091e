"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base


# Compile JSONB as JSON for SQLite (used in tests)
@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_: Any, compiler: Any, **kw: Any) -> str:
    return "JSON"


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_USER_ID = "did:privy:test-user"
OTHER_USER_ID = "did:privy:other-user"


class FakeStorage:
    """Object storage that keeps uploads in memory."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        self.objects[path] = data
        return f"https://storage.test/uploads/{path}"


class FakeClassifier:
    """Image classifier with a fixed verdict."""

    def __init__(self, verdict: bool = True) -> None:
        self.verdict = verdict
        self.prompts: list[str] = []

    async def classify(self, image: bytes, content_type: str, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.verdict


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def test_user() -> TokenUser:
    """The authenticated caller."""
    return TokenUser(id=TEST_USER_ID, email="test@example.com")


@pytest.fixture
def other_user() -> TokenUser:
    """A second user for ownership checks."""
    return TokenUser(id=OTHER_USER_ID, email="other@example.com")


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key="test-secret-key",
        algorithm="HS256",
        expire_minutes=30,
        jwks_url="",
        issuer="",
        audience="",
    )


@pytest.fixture
def auth_token(auth_provider: JWTAuthProvider, test_user: TokenUser) -> str:
    """Create auth token for test user."""
    return auth_provider.create_token(test_user)


@pytest.fixture
def auth_headers(auth_token: str) -> dict[str, str]:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def other_headers(auth_provider: JWTAuthProvider, other_user: TokenUser) -> dict[str, str]:
    """Authorization headers for the second user."""
    return {"Authorization": f"Bearer {auth_provider.create_token(other_user)}"}


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth, no database overrides)."""
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    session_factory: async_sessionmaker[AsyncSession],
    auth_provider: JWTAuthProvider,
    auth_headers: dict[str, str],
    storage: FakeStorage,
    classifier: FakeClassifier,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated test client with database and auth overrides.

    This client:
    - Uses an in-memory SQLite database
    - Signs requests as the test user (send ``other_headers`` to act as someone else)
    - Swaps object storage and the image classifier for in-memory fakes
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import (
        get_event_service,
        get_points_service,
        get_task_service,
        get_user_service,
    )
    from domain.services.event_service import EventService
    from domain.services.points_service import PointsService
    from domain.services.task_service import TaskService
    from domain.services.user_service import UserService
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
    from main import create_app
    from tests.integration.helpers import CALENDAR_START

    app = create_app()

    def test_uow_factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    points_service = PointsService(test_uow_factory)
    event_service = EventService(
        test_uow_factory,
        points_service=points_service,
        timezone="Asia/Colombo",
        calendar_start=CALENDAR_START,
    )
    user_service = UserService(test_uow_factory, points_service=points_service)
    task_service = TaskService(
        test_uow_factory,
        points_service=points_service,
        storage=storage,
        classifier=classifier,
        max_upload_bytes=1024,
    )

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_points_service] = lambda: points_service
    app.dependency_overrides[get_event_service] = lambda: event_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_task_service] = lambda: task_service

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c

    app.dependency_overrides.clear()
