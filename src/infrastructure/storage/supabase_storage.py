"""Supabase Storage implementation of the object storage protocol."""

import logging
from urllib.parse import quote

import httpx

from core.config import settings
from core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


class SupabaseStorage:
    """Uploads objects to a public Supabase Storage bucket over its REST API."""

    def __init__(
        self,
        base_url: str = settings.supabase_url,
        service_key: str = settings.supabase_service_role_key,
        bucket: str = settings.storage_bucket,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._bucket = bucket
        self._timeout = timeout
        self._transport = transport

    def public_url(self, path: str) -> str:
        """Public URL of an object in the bucket."""
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{quote(path)}"

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """
        Upload bytes to ``{bucket}/{path}`` without overwriting.

        Raises:
            UpstreamServiceError: If storage is not configured or rejects the upload
        """
        if not self._base_url or not self._service_key:
            raise UpstreamServiceError("storage", "Object storage is not configured")

        url = f"{self._base_url}/storage/v1/object/{self._bucket}/{quote(path)}"
        headers = {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
            "Content-Type": content_type,
            "x-upsert": "false",
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    url, content=data, headers=headers, timeout=self._timeout
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.exception("Upload of %s to bucket %s failed", path, self._bucket)
            raise UpstreamServiceError("storage", "Failed to upload file") from e

        logger.info("Uploaded %d bytes to %s/%s", len(data), self._bucket, path)
        return self.public_url(path)
