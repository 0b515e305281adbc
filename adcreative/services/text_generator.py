"""
Text generation client.

Talks to OpenAI-compatible chat completions APIs (OpenAI, TogetherAI, ...).
Configured providers are tried in order; when every provider fails the last
error is raised as TextGenerationError.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from adcreative.core.config import settings

logger = logging.getLogger(__name__)


class TextGenerationError(Exception):
    """No provider could generate text"""


@dataclass
class GeneratedText:
    text: str
    provider: str
    model: str
    usage: Dict[str, Any] = field(default_factory=dict)


class TextGenerator:
    """Interface of the text-generation collaborator"""

    def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: Optional[str] = None,
    ) -> GeneratedText:
        raise NotImplementedError


class ChatCompletionsTextGenerator(TextGenerator):
    """
    Text generator over one or more OpenAI-compatible providers.

    providers: [{"name", "base_url", "api_key", "organization"}] in fallback order
    """

    def __init__(
        self,
        providers: Optional[List[dict]] = None,
        default_model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.providers = providers if providers is not None else settings.text_generation_providers
        self.default_model = default_model or settings.TEXT_GENERATION_MODEL
        self.timeout = timeout or settings.TEXT_GENERATION_TIMEOUT_SECONDS
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def close(self):
        """Close the HTTP client"""
        if self._client:
            self._client.close()
            self._client = None

    def _generate_with_provider(
        self, provider: dict, prompt: str, model: str, max_tokens: int,
        temperature: float, system_prompt: Optional[str],
    ) -> GeneratedText:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        headers = {
            "Authorization": f"Bearer {provider['api_key']}",
            "Content-Type": "application/json",
        }
        if provider.get("organization"):
            headers["OpenAI-Organization"] = provider["organization"]

        url = f"{provider['base_url'].rstrip('/')}/v1/chat/completions"
        response = self.client.post(
            url,
            headers=headers,
            json={
                "model": model,
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
        )
        response.raise_for_status()
        data = response.json()

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise TextGenerationError(f"Unexpected response from {provider['name']}: {e}") from e

        return GeneratedText(
            text=text or "",
            provider=provider["name"],
            model=model,
            usage=data.get("usage") or {},
        )

    def generate(
        self,
        prompt: str,
        model: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        system_prompt: Optional[str] = None,
    ) -> GeneratedText:
        if not self.providers:
            raise TextGenerationError("No text generation provider configured")

        model = model or self.default_model
        last_error: Optional[Exception] = None

        for provider in self.providers:
            try:
                result = self._generate_with_provider(
                    provider, prompt, model, max_tokens, temperature, system_prompt
                )
                logger.info(f"[TextGenerator] Generated {len(result.text)} chars via {provider['name']}")
                return result
            except (httpx.HTTPError, TextGenerationError, ValueError) as e:
                last_error = e
                logger.warning(f"[TextGenerator] Provider {provider['name']} failed, trying next: {e}")

        raise TextGenerationError(f"All text generation providers failed. Last error: {last_error}")
