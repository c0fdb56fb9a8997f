"""Abstract base class for LLM service providers.

Defines the contract for the large-language-model backends used to tag
links.  Implementations wrap OpenAI (and OpenAI-compatible endpoints such
as Azure, OpenRouter and Ollama) or Anthropic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: OpenAILLMProvider, AzureOpenAILLMProvider,
# OpenRouterLLMProvider, OllamaLLMProvider, AnthropicLLMProvider
# Located in: link_archiver/providers/llm/
class ILLMProvider(ABC):
    """Contract for LLM text completion."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 500,
    ) -> str:
        """Generate a text completion from the model.

        Parameters
        ----------
        system_prompt:
            The system/instruction message that sets the model's behaviour.
        user_prompt:
            The user-facing prompt containing the actual request or data.
        temperature:
            Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_tokens:
            Upper bound on the number of tokens in the response.

        Returns
        -------
        str
            The model's text response.

        Raises
        ------
        link_archiver.utils.errors.LLMError
            If the API call fails or returns an empty response.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this LLM provider.

        Example return values: ``"openai"``, ``"anthropic"``, ``"ollama"``.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (credentials or endpoint set)."""
