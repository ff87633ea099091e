"""Object storage protocol."""

from typing import Protocol


class IObjectStorage(Protocol):
    """Protocol for public object storage backends."""

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """
        Store an object and return its public URL.

        Args:
            path: Object key inside the bucket
            data: Raw bytes
            content_type: MIME type sent with the object

        Returns:
            Publicly resolvable URL of the stored object
        """
        ...
