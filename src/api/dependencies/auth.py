"""Authentication dependencies for FastAPI."""

from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IAuthProvider, TokenUser

# Bearer tokens issued by the external identity provider
security = HTTPBearer(auto_error=False, description="Identity provider access token")

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]


@lru_cache
def get_auth_provider() -> IAuthProvider:
    """Token verifier configured from settings."""
    return JWTAuthProvider()


async def _resolve(
    credentials: HTTPAuthorizationCredentials | None, provider: IAuthProvider
) -> TokenUser | None:
    if not credentials or not credentials.credentials:
        return None

    user = await provider.validate_token(credentials.credentials)
    if user:
        # Service log lines for this request carry the caller
        structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


async def get_current_user(
    credentials: Credentials,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    The verified caller.

    Raises:
        AuthenticationError: UNAUTHORIZED without a bearer token,
            INVALID_TOKEN when the token does not verify
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    user = await _resolve(credentials, auth_provider)
    if not user:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )
    return user


async def get_optional_user(
    credentials: Credentials,
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> TokenUser | None:
    """The caller on public routes. Bad tokens are treated as anonymous."""
    return await _resolve(credentials, auth_provider)


CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
OptionalUser = Annotated[TokenUser | None, Depends(get_optional_user)]
