from typing import List, Protocol

from agri_assist.domain.models import ClassificationResult


class ImageClassifierPort(Protocol):
    model: str

    async def classify(self, image: bytes) -> List[ClassificationResult]:
        """
        Classify a preprocessed JPEG image.
        Raises TransientUnavailable on cold start, HardFailure otherwise.
        """
        ...


class TranscriberPort(Protocol):
    model: str

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        ...


class TextGeneratorPort(Protocol):
    model: str

    async def generate(self, message: str, system_prompt: str) -> str:
        ...


class ResponderPort(Protocol):
    def respond(self, message: str) -> str:
        """Local answer that never fails; used when every remote tier is exhausted."""
        ...
