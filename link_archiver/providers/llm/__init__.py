"""LLM provider adapters and the factory that picks one from settings."""

from __future__ import annotations

from link_archiver.config.settings import Settings
from link_archiver.interfaces.llm_provider import ILLMProvider
from link_archiver.providers.llm.anthropic_provider import AnthropicLLMProvider
from link_archiver.providers.llm.ollama_provider import OllamaLLMProvider
from link_archiver.providers.llm.openai_provider import (
    AzureOpenAILLMProvider,
    OpenAILLMProvider,
    OpenRouterLLMProvider,
)

_PROVIDERS: dict[str, type[ILLMProvider]] = {
    "ollama": OllamaLLMProvider,
    "openai": OpenAILLMProvider,
    "azure": AzureOpenAILLMProvider,
    "anthropic": AnthropicLLMProvider,
    "openrouter": OpenRouterLLMProvider,
}


def build_llm_provider(settings: Settings) -> ILLMProvider | None:
    """Instantiate the first configured provider, or ``None`` if none is.

    Priority follows :meth:`Settings.get_available_ai_providers`.
    """
    available = settings.get_available_ai_providers()
    if not available:
        return None
    return _PROVIDERS[available[0]](settings)


__all__ = [
    "AnthropicLLMProvider",
    "AzureOpenAILLMProvider",
    "OllamaLLMProvider",
    "OpenAILLMProvider",
    "OpenRouterLLMProvider",
    "build_llm_provider",
]
