"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class TokenUser:
    """The caller identified by a verified access token.

    ``id`` is the provider's opaque subject string and doubles as the
    primary key of the user's record.
    """

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an access token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """Create a token for a user (local development and tests)."""
        ...
