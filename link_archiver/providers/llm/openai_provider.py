"""OpenAI-compatible LLM provider adapters.

Wraps the ``openai`` async client to implement :class:`ILLMProvider` for
three backends that all speak the chat-completions protocol:

    OpenAILLMProvider        -- api.openai.com
    AzureOpenAILLMProvider   -- an Azure OpenAI deployment
    OpenRouterLLMProvider    -- openrouter.ai (OpenAI-compatible gateway)

Only text completion is needed for tagging, so unlike a general-purpose
adapter these never send images.
"""

from __future__ import annotations

import openai
import structlog

from link_archiver.config.settings import Settings
from link_archiver.interfaces.llm_provider import ILLMProvider
from link_archiver.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)

_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
_REQUEST_TIMEOUT = openai.Timeout(30.0, connect=5.0)


class _ChatCompletionsProvider(ILLMProvider):
    """Shared chat-completions call for every OpenAI-protocol backend."""

    _provider_label = "openai"

    def __init__(self, client: openai.AsyncOpenAI, model: str, api_key: str) -> None:
        self._client = client
        self._model = model
        self._api_key = api_key

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
        except openai.APITimeoutError as exc:
            raise LLMError(
                message=f"{self._provider_label} timed out",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise LLMError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMError(
                message=f"{self._provider_label} returned empty response",
                provider_name=self.get_provider_name(),
            )
        logger.info(
            "llm_completion",
            provider=self._provider_label,
            model=self._model,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def is_available(self) -> bool:
        return bool(self._api_key)

    def get_provider_name(self) -> str:
        return self._provider_label


class OpenAILLMProvider(_ChatCompletionsProvider):
    """LLM provider backed by the OpenAI API (``OPENAI_API_KEY``)."""

    _provider_label = "openai"

    def __init__(self, settings: Settings) -> None:
        super().__init__(
            client=openai.AsyncOpenAI(api_key=settings.openai_api_key, timeout=_REQUEST_TIMEOUT),
            model=settings.openai_model,
            api_key=settings.openai_api_key,
        )


class AzureOpenAILLMProvider(_ChatCompletionsProvider):
    """LLM provider backed by an Azure OpenAI deployment.

    Azure addresses models by deployment name, so ``AZURE_DEPLOYMENT`` is
    passed where other backends take a model id.
    """

    _provider_label = "azure"

    def __init__(self, settings: Settings) -> None:
        self._endpoint = settings.azure_endpoint
        super().__init__(
            client=openai.AsyncAzureOpenAI(
                api_key=settings.azure_api_key,
                azure_endpoint=settings.azure_endpoint,
                api_version=settings.azure_api_version,
                timeout=_REQUEST_TIMEOUT,
            ),
            model=settings.azure_deployment,
            api_key=settings.azure_api_key,
        )

    def is_available(self) -> bool:
        return bool(self._api_key and self._endpoint and self._model)


class OpenRouterLLMProvider(_ChatCompletionsProvider):
    """LLM provider backed by OpenRouter's OpenAI-compatible gateway."""

    _provider_label = "openrouter"

    def __init__(self, settings: Settings) -> None:
        super().__init__(
            client=openai.AsyncOpenAI(
                api_key=settings.openrouter_api_key,
                base_url=_OPENROUTER_BASE_URL,
                timeout=_REQUEST_TIMEOUT,
            ),
            model=settings.openrouter_model,
            api_key=settings.openrouter_api_key,
        )
