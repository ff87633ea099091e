"""Database engine and session factory."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import settings


def engine_options(url: str) -> dict[str, Any]:
    """Engine keyword arguments for the configured database."""
    options: dict[str, Any] = {
        "echo": settings.debug,
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_recycle": settings.db_pool_recycle_seconds,
    }
    # Transaction-mode pooling breaks asyncpg's prepared statement cache
    if "pooler.supabase.com" in url:
        options["connect_args"] = {"statement_cache_size": 0}
    return options


engine = create_async_engine(
    settings.async_database_url, **engine_options(settings.async_database_url)
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session for the readiness probe."""
    async with async_session_factory() as session:
        yield session
