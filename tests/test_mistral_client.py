import asyncio
from types import SimpleNamespace

import httpx
import pytest
from mistralai.models import MistralError

from agri_assist.application.conversation import RuleBasedAgriResponder
from agri_assist.application.errors import HardFailure, TransientUnavailable
from agri_assist.application.use_cases import ChatUseCase
from agri_assist.infrastructure.llm.mistral_client import MistralTextGenerator


class DummyChat:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def complete_async(self, model, messages):
        self.calls.append({"model": model, "messages": messages})
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_generator(content=None, error=None):
    chat = DummyChat(content, error)
    return MistralTextGenerator("key", model="mistral-small-latest", client=SimpleNamespace(chat=chat)), chat


def api_error(status_code):
    request = httpx.Request("POST", "https://api.mistral.ai/v1/chat/completions")
    response = httpx.Response(status_code, request=request, text="rejected")
    return MistralError(f"API error occurred: Status {status_code}", response)


def test_generate_sends_system_and_user_messages():
    generator, chat = make_generator(" Rotate your crops. ")

    assert asyncio.run(generator.generate("How to stop blight?", "You advise farmers.")) == "Rotate your crops."
    assert chat.calls == [{
        "model": "mistral-small-latest",
        "messages": [
            {"role": "system", "content": "You advise farmers."},
            {"role": "user", "content": "How to stop blight?"},
        ],
    }]


def test_empty_content_is_hard_failure():
    generator, _ = make_generator("")
    with pytest.raises(HardFailure) as excinfo:
        asyncio.run(generator.generate("hi", "sys"))
    assert excinfo.value.tier == "mistral-small-latest"


def test_service_unavailable_is_transient():
    generator, _ = make_generator(error=api_error(503))
    with pytest.raises(TransientUnavailable) as excinfo:
        asyncio.run(generator.generate("hi", "sys"))
    assert excinfo.value.tier == "mistral-small-latest"


@pytest.mark.parametrize("status_code", [400, 401, 422, 500])
def test_other_api_errors_are_hard_failures(status_code):
    generator, _ = make_generator(error=api_error(status_code))
    with pytest.raises(HardFailure):
        asyncio.run(generator.generate("hi", "sys"))


def test_validation_error_subclass_is_hard_failure():
    class RejectedMessages(MistralError):
        pass

    request = httpx.Request("POST", "https://api.mistral.ai/v1/chat/completions")
    error = RejectedMessages("invalid messages", httpx.Response(422, request=request, text="{}"))
    generator, _ = make_generator(error=error)

    with pytest.raises(HardFailure):
        asyncio.run(generator.generate("hi", "sys"))


def test_network_error_is_hard_failure():
    generator, _ = make_generator(error=httpx.ConnectError("connection refused"))
    with pytest.raises(HardFailure):
        asyncio.run(generator.generate("hi", "sys"))


def test_chat_falls_back_to_responder_when_mistral_rejects_request():
    generator, _ = make_generator(error=api_error(422))
    responder = RuleBasedAgriResponder()
    usecase = ChatUseCase([generator], responder)

    reply = asyncio.run(usecase.chat("how to water?"))

    assert reply.used_fallback
    assert reply.narrative == responder.respond("how to water?")
