"""Unit tests for the OpenAI image classifier."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIConnectionError

from core.exceptions import UpstreamServiceError
from infrastructure.vision.openai_classifier import OpenAIImageClassifier


def _client(reply: str | None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=reply))]
        )
    )
    return client


class TestClassify:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("reply", "expected"),
        [("true", True), ("TRUE.", True), ("It is True", True), ("false", False), (None, False)],
    )
    async def test_verdict_is_true_substring(self, reply: str | None, expected: bool) -> None:
        classifier = OpenAIImageClassifier(client=_client(reply))

        assert await classifier.classify(b"img", "image/png", "Is it a tuk-tuk?") is expected

    @pytest.mark.asyncio
    async def test_sends_prompt_and_inline_image(self) -> None:
        client = _client("true")
        classifier = OpenAIImageClassifier(model="gpt-4o", client=client)

        await classifier.classify(b"img", "image/png", "Is it a tuk-tuk?")

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["max_tokens"] == 50
        text_part, image_part = kwargs["messages"][0]["content"]
        assert text_part == {"type": "text", "text": "Is it a tuk-tuk?"}
        assert image_part["image_url"]["url"] == "data:image/png;base64,aW1n"

    @pytest.mark.asyncio
    async def test_api_error_raises_upstream_error(self) -> None:
        client = _client("true")
        client.chat.completions.create.side_effect = APIConnectionError(
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        )
        classifier = OpenAIImageClassifier(client=client)

        with pytest.raises(UpstreamServiceError):
            await classifier.classify(b"img", "image/png", "?")
