"""Unit tests for LLM provider adapters and provider selection."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from link_archiver.providers.llm import (
    AnthropicLLMProvider,
    AzureOpenAILLMProvider,
    OllamaLLMProvider,
    OpenAILLMProvider,
    OpenRouterLLMProvider,
    build_llm_provider,
)
from link_archiver.utils.errors import LLMError
from tests.conftest import make_settings


def _chat_response(content: str | None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(total_tokens=42)
    return response


class TestBuildLLMProvider:
    def test_none_without_credentials(self) -> None:
        assert build_llm_provider(make_settings()) is None

    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            ({"ollama_endpoint_url": "http://ollama:11434"}, OllamaLLMProvider),
            ({"openai_api_key": "sk-test"}, OpenAILLMProvider),
            ({"azure_api_key": "az", "azure_endpoint": "https://x.openai.azure.com"}, AzureOpenAILLMProvider),
            ({"anthropic_api_key": "an"}, AnthropicLLMProvider),
            ({"openrouter_api_key": "or"}, OpenRouterLLMProvider),
        ],
    )
    def test_selects_configured_provider(self, overrides: dict, expected: type) -> None:
        assert isinstance(build_llm_provider(make_settings(**overrides)), expected)

    def test_first_configured_provider_wins(self) -> None:
        provider = build_llm_provider(make_settings(openai_api_key="sk", anthropic_api_key="an"))
        assert provider.get_provider_name() == "openai"


class TestOpenAICompatibleProviders:
    @pytest.mark.asyncio
    async def test_complete_success(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_chat_response('["python"]'))

        with patch("link_archiver.providers.llm.openai_provider.openai.AsyncOpenAI", return_value=mock_client):
            provider = OpenAILLMProvider(make_settings(openai_api_key="sk-test", openai_model="gpt-test"))
            result = await provider.complete("system", "user")

        assert result == '["python"]'
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}

    @pytest.mark.asyncio
    async def test_empty_response_raises(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_chat_response(None))

        with patch("link_archiver.providers.llm.openai_provider.openai.AsyncOpenAI", return_value=mock_client):
            provider = OpenAILLMProvider(make_settings(openai_api_key="sk-test"))
            with pytest.raises(LLMError):
                await provider.complete("system", "user")

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self) -> None:
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=request)
        )

        with patch("link_archiver.providers.llm.openai_provider.openai.AsyncOpenAI", return_value=mock_client):
            provider = OpenRouterLLMProvider(make_settings(openrouter_api_key="or"))
            with pytest.raises(LLMError) as exc_info:
                await provider.complete("system", "user")

        assert exc_info.value.provider_name == "openrouter"

    def test_openrouter_base_url(self) -> None:
        with patch("link_archiver.providers.llm.openai_provider.openai.AsyncOpenAI") as client_cls:
            OpenRouterLLMProvider(make_settings(openrouter_api_key="or"))
        assert client_cls.call_args.kwargs["base_url"] == "https://openrouter.ai/api/v1"

    def test_azure_uses_deployment(self) -> None:
        with patch("link_archiver.providers.llm.openai_provider.openai.AsyncAzureOpenAI") as client_cls:
            provider = AzureOpenAILLMProvider(
                make_settings(
                    azure_api_key="az",
                    azure_endpoint="https://x.openai.azure.com",
                    azure_deployment="tagger",
                )
            )
        assert client_cls.call_args.kwargs["azure_endpoint"] == "https://x.openai.azure.com"
        assert provider.is_available() is True
        assert provider.get_provider_name() == "azure"

    def test_availability_follows_key(self) -> None:
        assert OpenAILLMProvider(make_settings(openai_api_key="")).is_available() is False
        assert OpenAILLMProvider(make_settings(openai_api_key="sk")).is_available() is True


class TestOllamaLLMProvider:
    @pytest.mark.asyncio
    async def test_points_client_at_v1(self) -> None:
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_chat_response("[]"))

        with patch(
            "link_archiver.providers.llm.ollama_provider.openai.AsyncOpenAI", return_value=mock_client
        ) as client_cls:
            provider = OllamaLLMProvider(make_settings(ollama_endpoint_url="http://ollama:11434/"))
            assert await provider.complete("system", "user") == "[]"

        assert client_cls.call_args.kwargs["base_url"] == "http://ollama:11434/v1"
        assert provider.get_provider_name() == "ollama"


class TestAnthropicLLMProvider:
    @pytest.mark.asyncio
    async def test_joins_text_blocks(self) -> None:
        response = MagicMock()
        response.content = [MagicMock(type="text", text='["a",'), MagicMock(type="text", text='"b"]')]
        response.usage = MagicMock(input_tokens=10, output_tokens=5)
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=response)

        with patch(
            "link_archiver.providers.llm.anthropic_provider.anthropic.AsyncAnthropic", return_value=mock_client
        ):
            provider = AnthropicLLMProvider(make_settings(anthropic_api_key="an"))
            result = await provider.complete("system", "user")

        assert result == '["a",\n"b"]'
        assert mock_client.messages.create.call_args.kwargs["system"] == "system"

    @pytest.mark.asyncio
    async def test_no_text_raises(self) -> None:
        response = MagicMock()
        response.content = []
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=response)

        with patch(
            "link_archiver.providers.llm.anthropic_provider.anthropic.AsyncAnthropic", return_value=mock_client
        ):
            provider = AnthropicLLMProvider(make_settings(anthropic_api_key="an"))
            with pytest.raises(LLMError):
                await provider.complete("system", "user")
