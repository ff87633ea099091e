"""JWT authentication provider implementation.

Access tokens come from the external auth provider, signed ES256 and
verified against its JWKS. Locally-created HS256 tokens are accepted for
development and tests.

Only ``sub`` is required; it becomes the user id.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# kid -> JWK, shared across requests
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(jwks_url: str) -> dict[str, Any]:
    """Fetch and cache the provider's signing keys."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
    except (httpx.HTTPError, ValueError):
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = {
        key_data["kid"]: key_data for key_data in jwks_data.get("keys", []) if key_data.get("kid")
    }
    logger.info("Fetched %d JWKS keys", len(_jwks_cache))
    return _jwks_cache


def clear_jwks_cache() -> None:
    """Forget cached signing keys so the next lookup refetches them."""
    global _jwks_cache
    _jwks_cache = None


class JWTAuthProvider:
    """JWT-based authentication provider."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks_url: str = settings.auth_jwks_url,
        issuer: str = settings.auth_issuer,
        audience: str = settings.auth_audience,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks_url = jwks_url
        self._issuer = issuer or None
        self._audience = audience or None

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the caller.

        ES256 tokens are checked against the JWKS public key named by the
        header ``kid``; anything else is checked with the shared secret.

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg == "ES256":
                payload = await self._validate_es256(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    **self._claim_options(),
                )
        except (JWTError, ValueError):
            return None

        if payload is None:
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None

        user_metadata = payload.get("user_metadata") or {}
        return TokenUser(
            id=str(user_id),
            email=payload.get("email"),
            display_name=user_metadata.get("display_name") or payload.get("name"),
        )

    def _claim_options(self) -> dict[str, Any]:
        return {
            "audience": self._audience,
            "issuer": self._issuer,
            "options": {"verify_aud": self._audience is not None},
        }

    async def _validate_es256(self, token: str, header: dict) -> Optional[dict]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys(self._jwks_url)).get(kid)
        if not key_data:
            # Unknown kid, the provider may have rotated keys
            clear_jwks_cache()
            key_data = (await _get_jwks_keys(self._jwks_url)).get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        ec_key = ECKey(key_data, algorithm="ES256")
        return jwt.decode(token, ec_key, algorithms=["ES256"], **self._claim_options())

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 token for a user (local development and tests)."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {"sub": user.id, "exp": expire}
        if user.email:
            payload["email"] = user.email
        if user.display_name:
            payload["user_metadata"] = {"display_name": user.display_name}
        if self._issuer:
            payload["iss"] = self._issuer
        if self._audience:
            payload["aud"] = self._audience

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
