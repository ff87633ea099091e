"""Main FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.middleware.security import SecurityHeadersMiddleware
from api.routes.health import router as health_router
from api.v1 import router as v1_router
from core.config import settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.database.session import engine

logger = structlog.get_logger()

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log startup and release pooled connections on shutdown."""
    logger.info(
        "app_started",
        environment=settings.app_env,
        event_timezone=settings.event_timezone,
        calendar_start_date=settings.calendar_start_date.isoformat(),
    )
    yield
    await engine.dispose()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## Community event calendar\n\n"
            "Jelloverse lets members browse a shared calendar of jams, host their "
            "own, toggle attendance and earn points for taking part.\n\n"
            "### Features\n"
            "- **Calendar**: events filtered by day, vibe, time of day and attendance\n"
            "- **Profiles**: display name, bio and up to three vibes\n"
            "- **Points**: tasks award points, some need a photo proof\n\n"
            "### Authentication\n"
            "Listing events is public. Everything else needs a bearer token "
            "from the auth provider:\n"
            "```\nAuthorization: Bearer <your_token>\n```\n\n"
            "### Rate Limits\n"
            "- GET endpoints: 30 requests/minute\n"
            "- POST/PATCH/DELETE: 10 requests/minute\n"
            "- Task verification: 5 requests/minute"
        ),
        version=settings.app_version,
        debug=settings.debug,
        openapi_tags=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "events", "description": "Calendar and attendance operations"},
            {"name": "users", "description": "Profiles, directory and points history"},
            {"name": "tasks", "description": "Gamification tasks and photo proofs"},
            {"name": "uploads", "description": "Image uploads"},
        ],
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # LIFO order, last added is outermost
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
        proxy_headers=True,
        forwarded_allow_ips=settings.forwarded_allow_ips,
    )
