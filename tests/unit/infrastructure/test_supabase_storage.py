"""Unit tests for the Supabase Storage client."""

import httpx
import pytest

from core.exceptions import UpstreamServiceError
from infrastructure.storage.supabase_storage import SupabaseStorage


def _storage(handler) -> SupabaseStorage:  # type: ignore[no-untyped-def]
    return SupabaseStorage(
        base_url="https://proj.supabase.co/",
        service_key="service-key",
        bucket="uploads",
        transport=httpx.MockTransport(handler),
    )


class TestUpload:
    @pytest.mark.asyncio
    async def test_posts_object_and_returns_public_url(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"Key": "uploads/task-proofs/u/1-a.jpg"})

        url = await _storage(handler).upload("task-proofs/u/1-a.jpg", b"img", "image/jpeg")

        assert url == "https://proj.supabase.co/storage/v1/object/public/uploads/task-proofs/u/1-a.jpg"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/storage/v1/object/uploads/task-proofs/u/1-a.jpg"
        assert request.headers["authorization"] == "Bearer service-key"
        assert request.headers["x-upsert"] == "false"
        assert request.headers["content-type"] == "image/jpeg"
        assert request.content == b"img"

    @pytest.mark.asyncio
    async def test_error_status_raises_upstream_error(self) -> None:
        storage = _storage(lambda request: httpx.Response(409, json={"error": "Duplicate"}))

        with pytest.raises(UpstreamServiceError) as exc_info:
            await storage.upload("p.jpg", b"img", "image/jpeg")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_unconfigured_storage_raises(self) -> None:
        storage = SupabaseStorage(base_url="", service_key="")

        with pytest.raises(UpstreamServiceError):
            await storage.upload("p.jpg", b"img", "image/jpeg")
