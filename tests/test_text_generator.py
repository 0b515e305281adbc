"""
Tests for the chat completions text generator (mocked transport)
"""
import json

import httpx
import pytest

from adcreative.services.text_generator import ChatCompletionsTextGenerator, TextGenerationError

PROVIDERS = [
    {"name": "openai", "base_url": "https://openai.test", "api_key": "k1", "organization": "org"},
    {"name": "togetherai", "base_url": "https://together.test/", "api_key": "k2", "organization": None},
]


def _completion(text):
    return {"choices": [{"message": {"content": text}}], "usage": {"total_tokens": 12}}


def _generator(handler, providers=PROVIDERS):
    return ChatCompletionsTextGenerator(
        providers=providers,
        default_model="test-model",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_generate_sends_chat_request():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("Headline: Hi"))

    result = _generator(handler).generate("prompt text", max_tokens=400, temperature=0.9)

    assert result.text == "Headline: Hi"
    assert result.provider == "openai"
    assert result.model == "test-model"
    assert result.usage == {"total_tokens": 12}
    assert seen["url"] == "https://openai.test/v1/chat/completions"
    assert seen["headers"]["authorization"] == "Bearer k1"
    assert seen["headers"]["openai-organization"] == "org"
    assert seen["body"] == {
        "model": "test-model",
        "messages": [{"role": "user", "content": "prompt text"}],
        "max_tokens": 400,
        "temperature": 0.9,
    }


def test_system_prompt_goes_first():
    seen = {}

    def handler(request: httpx.Request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("ok"))

    _generator(handler).generate("prompt", system_prompt="You write ads")

    assert seen["body"]["messages"][0] == {"role": "system", "content": "You write ads"}


def test_falls_back_to_next_provider():
    def handler(request: httpx.Request):
        if request.url.host == "openai.test":
            return httpx.Response(500, json={"error": "down"})
        return httpx.Response(200, json=_completion("from together"))

    result = _generator(handler).generate("prompt")

    assert result.text == "from together"
    assert result.provider == "togetherai"


def test_all_providers_fail():
    generator = _generator(lambda request: httpx.Response(503))

    with pytest.raises(TextGenerationError):
        generator.generate("prompt")


def test_malformed_response_counts_as_failure():
    generator = _generator(lambda request: httpx.Response(200, json={"choices": []}), providers=PROVIDERS[:1])

    with pytest.raises(TextGenerationError):
        generator.generate("prompt")


def test_no_providers_configured():
    generator = _generator(lambda request: httpx.Response(200, json=_completion("x")), providers=[])

    with pytest.raises(TextGenerationError):
        generator.generate("prompt")
