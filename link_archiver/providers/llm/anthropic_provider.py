"""Anthropic LLM provider adapter.

Wraps the ``anthropic`` async client to implement :class:`ILLMProvider`.
The Messages API takes the system prompt as a separate parameter and
returns a list of content blocks; only text blocks are kept.
"""

from __future__ import annotations

import anthropic
import structlog

from link_archiver.config.settings import Settings
from link_archiver.interfaces.llm_provider import ILLMProvider
from link_archiver.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


class AnthropicLLMProvider(ILLMProvider):
    """LLM provider backed by the Anthropic Claude API."""

    def __init__(self, settings: Settings) -> None:
        self._api_key = settings.anthropic_api_key
        self._model = settings.anthropic_model
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 500,
    ) -> str:
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                temperature=temperature,
            )
        except anthropic.APIError as exc:
            raise LLMError(
                message=f"Anthropic API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        text_blocks = [block.text for block in response.content if block.type == "text"]
        if not text_blocks:
            raise LLMError(
                message="Anthropic returned no text content",
                provider_name=self.get_provider_name(),
            )
        logger.info(
            "anthropic_completion",
            model=self._model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        return "\n".join(text_blocks)

    def is_available(self) -> bool:
        return bool(self._api_key)

    def get_provider_name(self) -> str:
        return "anthropic"
