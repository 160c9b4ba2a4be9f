"""
Hugging Face Inference adapters.

Each adapter implements one application port over the hf-inference router and
translates remote responses into the cascade's error taxonomy: HTTP 503 or a
"model is loading" body is a TransientUnavailable, everything else that is not
a usable payload is a HardFailure.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from agri_assist.application.errors import HardFailure, TransientUnavailable
from agri_assist.domain.models import ClassificationResult


logger = logging.getLogger(__name__)

HF_BASE = "https://router.huggingface.co/hf-inference/models"

GENERATION_PARAMETERS: Dict[str, Any] = {
    "max_new_tokens": 512,
    "temperature": 0.7,
    "top_p": 0.9,
    "repetition_penalty": 1.1,
    "do_sample": True,
    "return_full_text": False,
}


class HuggingFaceInferenceClient:
    def __init__(
        self,
        api_token: str,
        base_url: str = HF_BASE,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def post(
        self,
        model: str,
        content: Optional[bytes] = None,
        payload: Optional[Dict[str, Any]] = None,
        content_type: str = "application/json",
    ) -> Any:
        """POST to a model endpoint and return the decoded JSON body."""
        url = f"{self.base_url}/{model}"
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": content_type,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                if payload is not None:
                    resp = await client.post(url, headers=headers, json=payload)
                else:
                    resp = await client.post(url, headers=headers, content=content)
        except httpx.HTTPError as e:
            raise HardFailure(f"Request to {model} failed: {e}", tier=model) from e

        if resp.status_code == 503:
            raise TransientUnavailable(f"{model} is loading", tier=model)

        if resp.is_error:
            raise HardFailure(f"HF error {resp.status_code}: {resp.text[:120]}", tier=model)

        try:
            data = resp.json()
        except ValueError as e:
            raise HardFailure(f"{model} returned a non-JSON body", tier=model) from e

        if isinstance(data, dict) and data.get("error"):
            error = str(data["error"])
            if "loading" in error.lower():
                raise TransientUnavailable(error, tier=model)
            raise HardFailure(f"HF error: {error[:120]}", tier=model)

        return data


class HuggingFaceImageClassifier:
    def __init__(self, client: HuggingFaceInferenceClient, model: str):
        self.client = client
        self.model = model

    async def classify(self, image: bytes) -> List[ClassificationResult]:
        logger.debug("Classifying image with model: %s", self.model)
        data = await self.client.post(self.model, content=image, content_type="image/jpeg")

        if not isinstance(data, list) or not data:
            raise HardFailure("HuggingFace returned empty classification results", tier=self.model)

        try:
            return [ClassificationResult(label=item["label"], score=item["score"]) for item in data]
        except (KeyError, TypeError, ValidationError) as e:
            raise HardFailure(f"Malformed classification results: {e}", tier=self.model) from e


class HuggingFaceTranscriber:
    def __init__(self, client: HuggingFaceInferenceClient, model: str):
        self.client = client
        self.model = model

    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        data = await self.client.post(self.model, content=audio, content_type=mime_type)

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise HardFailure("Transcription was empty", tier=self.model)

        logger.info("%s transcript: %r", self.model, text[:80])
        return text.strip()


def build_llama3_prompt(message: str, system_prompt: str) -> str:
    return (
        "<|begin_of_text|><|start_header_id|>system<|end_header_id|>\n"
        f"{system_prompt}<|eot_id|><|start_header_id|>user<|end_header_id|>\n"
        f"{message}<|eot_id|><|start_header_id|>assistant<|end_header_id|>\n"
    )


class HuggingFaceTextGenerator:
    """Text generation for Llama-3 style instruct models such as Qalb."""

    def __init__(self, client: HuggingFaceInferenceClient, model: str):
        self.client = client
        self.model = model

    async def generate(self, message: str, system_prompt: str) -> str:
        payload = {
            "inputs": build_llama3_prompt(message, system_prompt),
            "parameters": GENERATION_PARAMETERS,
        }
        data = await self.client.post(self.model, payload=payload)

        text = None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            text = data[0].get("generated_text")
        if not isinstance(text, str) or not text.strip():
            raise HardFailure("Generation returned no text", tier=self.model)

        return text.strip()
