import logging
from typing import Any, Optional

import httpx
from mistralai import Mistral
from mistralai.models import MistralError

from agri_assist.application.errors import HardFailure, TransientUnavailable


logger = logging.getLogger(__name__)


class MistralTextGenerator:
    """Generation tier backed by the Mistral chat API."""

    def __init__(self, api_key: str, model: str = "mistral-large-latest", client: Optional[Any] = None):
        self.model = model
        self._client = client if client is not None else Mistral(api_key=api_key)

    async def generate(self, message: str, system_prompt: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": message},
        ]
        try:
            response = await self._client.chat.complete_async(model=self.model, messages=messages)
        # Base class of SDKError and HTTPValidationError.
        except MistralError as e:
            if getattr(e, "status_code", None) == 503:
                raise TransientUnavailable(f"{self.model} is unavailable", tier=self.model) from e
            raise HardFailure(f"Mistral chat call failed: {e}", tier=self.model) from e
        except httpx.HTTPError as e:
            raise HardFailure(f"Mistral request failed: {e}", tier=self.model) from e

        content = response.choices[0].message.content if response and response.choices else None
        if not isinstance(content, str) or not content.strip():
            raise HardFailure("Mistral returned no text", tier=self.model)
        return content.strip()
