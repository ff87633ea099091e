"""OpenAI vision implementation of the image classifier protocol."""

import base64
import logging

from openai import AsyncOpenAI, OpenAIError

from core.config import settings
from core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


class OpenAIImageClassifier:
    """Answers yes/no questions about an image with a vision chat model.

    The reply counts as a yes when it contains "true" (case-insensitive).
    Single attempt, no retries.
    """

    def __init__(
        self,
        api_key: str = settings.openai_api_key,
        model: str = settings.openai_vision_model,
        max_tokens: int = 50,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(api_key=api_key)
        self._model = model
        self._max_tokens = max_tokens

    async def classify(self, image: bytes, content_type: str, prompt: str) -> bool:
        data_url = f"data:{content_type};base64,{base64.b64encode(image).decode('ascii')}"

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    }
                ],
            )
        except OpenAIError as e:
            logger.error("Image classification failed: %s", e)
            raise UpstreamServiceError("classifier", "Failed to verify task") from e

        content = response.choices[0].message.content or ""
        verdict = "true" in content.lower()
        logger.info("Classifier verdict=%s (%d chars)", verdict, len(content))
        return verdict
