"""Image classifier protocol."""

from typing import Protocol


class IImageClassifier(Protocol):
    """Protocol for yes/no image classifiers used to verify task proofs."""

    async def classify(self, image: bytes, content_type: str, prompt: str) -> bool:
        """
        Ask whether the image satisfies the prompt.

        Args:
            image: Raw image bytes
            content_type: Image MIME type
            prompt: Question that should be answered with 'true' or 'false'

        Returns:
            True if the classifier answered affirmatively
        """
        ...
