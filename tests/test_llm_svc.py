import asyncio
from types import SimpleNamespace

import pytest

from app.core.config import Settings
from app.core.errors import ConfigurationError, InferenceError
from app.domain.services.llm_svc import OpenAIInferenceClient


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5)
        return SimpleNamespace(model=kwargs["model"], choices=[SimpleNamespace(message=message)], usage=usage)


def _fake_client(content):
    completions = _FakeCompletions(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.mark.parametrize("key", [None, ""])
def test_missing_api_key_is_a_configuration_error(key):
    with pytest.raises(ConfigurationError):
        OpenAIInferenceClient(key, model="m")


def test_from_settings_without_key_fails_fast():
    with pytest.raises(ConfigurationError):
        OpenAIInferenceClient.from_settings(Settings(OPENAI_API_KEY=""))


def test_infer_sends_system_and_user_messages():
    client, completions = _fake_client('[{"productId": "a"}]')
    inference = OpenAIInferenceClient("sk-test", model="gpt-test", timeout_s=5, max_tokens=100, client=client)

    reply = asyncio.run(inference.infer("REQUEST"))

    assert reply == '[{"productId": "a"}]'
    call = completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["timeout"] == 5
    assert call["max_tokens"] == 100
    assert [m["role"] for m in call["messages"]] == ["system", "user"]
    assert call["messages"][1]["content"] == "REQUEST"


@pytest.mark.parametrize("content", [None, ""])
def test_empty_completion_raises_inference_error(content):
    client, _ = _fake_client(content)
    inference = OpenAIInferenceClient("sk-test", model="m", client=client)

    with pytest.raises(InferenceError):
        asyncio.run(inference.infer("REQUEST"))
