"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

READ_LIMIT = "30/minute"
WRITE_LIMIT = "10/minute"
# Each proof check is a paid vision call
VERIFY_LIMIT = "5/minute"


def client_key(request: Request) -> str:
    """Rate limit bucket for a request: the socket peer address.

    Client-supplied forwarding headers are never read here. Behind a proxy,
    uvicorn rewrites the peer from X-Forwarded-For only for the hosts listed
    in ``settings.forwarded_allow_ips``.
    """
    return get_remote_address(request)


limiter = Limiter(
    key_func=client_key,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a 429 in the standard error shape."""
    limit = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return JSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": f"Too many requests, limit is {limit}",
            "details": {"limit": str(limit), "path": request.url.path},
        },
        headers={"Retry-After": "60"},
    )
