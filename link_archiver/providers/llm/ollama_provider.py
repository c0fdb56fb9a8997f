"""Ollama LLM provider adapter.

Talks to a self-hosted Ollama server through its OpenAI-compatible ``/v1``
API, reusing the ``openai`` client pointed at the Ollama base URL.  The
endpoint comes from ``OLLAMA_ENDPOINT_URL`` (or the legacy
``NEXT_PUBLIC_OLLAMA_ENDPOINT_URL``).
"""

from __future__ import annotations

import openai
import structlog

from link_archiver.config.settings import Settings
from link_archiver.interfaces.llm_provider import ILLMProvider
from link_archiver.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


class OllamaLLMProvider(ILLMProvider):
    """LLM provider backed by a local Ollama server."""

    def __init__(self, settings: Settings) -> None:
        self._base_url = settings.ollama_endpoint_url
        self._model = settings.ollama_model
        self._client = openai.AsyncOpenAI(
            base_url=f"{self._base_url.rstrip('/')}/v1",
            # Ollama ignores the key but the SDK requires a non-empty one.
            api_key="ollama",
        )

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 500,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            raise LLMError(
                message=f"Ollama API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMError(
                message="Ollama returned empty response",
                provider_name=self.get_provider_name(),
            )
        logger.info("ollama_completion", model=self._model)
        return content

    def is_available(self) -> bool:
        return bool(self._base_url)

    def get_provider_name(self) -> str:
        return "ollama"
