"""Tests for LLM client."""

import os
from unittest.mock import AsyncMock, Mock, patch

import pytest

from autodev.llm.client import (
    AnthropicLLMClient,
    LLMClientFactory,
    LLMResponseError,
    OpenAILLMClient,
    parse_json_object,
)


@pytest.mark.asyncio
async def test_anthropic_client_complete():
    """Test AnthropicLLMClient.complete() passes the bound model and system prompt."""
    with patch("autodev.llm.client.anthropic") as mock_anthropic:
        mock_response = Mock()
        mock_response.content = [Mock(text='{"tech_trends": '), Mock(text="[]}")]
        mock_response.usage.input_tokens = 10
        mock_response.usage.output_tokens = 20

        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=mock_response)
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        client = AnthropicLLMClient("test-key", "claude-3-5-haiku-latest")
        result = await client.complete("signals?", system="analyst")

        assert result.content == '{"tech_trends": []}'
        assert result.model == "claude-3-5-haiku-latest"
        assert result.tokens_used == 30
        kwargs = mock_client.messages.create.await_args.kwargs
        assert kwargs["model"] == "claude-3-5-haiku-latest"
        assert kwargs["system"] == "analyst"
        assert kwargs["messages"] == [{"role": "user", "content": "signals?"}]


@pytest.mark.asyncio
async def test_openai_client_complete():
    """Test OpenAILLMClient.complete() call."""
    with patch("autodev.llm.client.openai") as mock_openai:
        mock_choice = Mock()
        mock_choice.message.content = "openai response"
        mock_response = Mock()
        mock_response.choices = [mock_choice]
        mock_response.usage.total_tokens = 45

        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=mock_response)
        mock_openai.AsyncOpenAI.return_value = mock_client

        client = OpenAILLMClient("test-key", "gpt-4o-mini", max_tokens=200)
        result = await client.complete("test prompt", system="You are helpful")

        assert result.content == "openai response"
        assert result.tokens_used == 45
        kwargs = mock_client.chat.completions.create.await_args.kwargs
        assert kwargs["max_tokens"] == 200
        assert kwargs["messages"][0] == {"role": "system", "content": "You are helpful"}


def test_client_requires_package():
    with patch("autodev.llm.client.anthropic", None):
        with pytest.raises(ImportError):
            AnthropicLLMClient("key", "claude-3-5-haiku-latest")


def test_parse_json_object():
    assert parse_json_object('  {"a": 1} ') == {"a": 1}
    assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}


@pytest.mark.parametrize("content,message", [("not json", "Invalid JSON"), ("[1, 2]", "Expected JSON object")])
def test_parse_json_object_errors(content, message):
    with pytest.raises(LLMResponseError, match=message):
        parse_json_object(content)


def test_factory_infers_provider():
    assert LLMClientFactory._infer_provider("claude-3-5-haiku-latest") == "anthropic"
    assert LLMClientFactory._infer_provider("gpt-4o-mini") == "openai"
    assert LLMClientFactory._infer_provider("llama-3") is None


def test_factory_returns_none_without_api_key():
    with patch.dict(os.environ, {}, clear=True):
        assert LLMClientFactory.create("claude-3-5-haiku-latest") is None


def test_factory_creates_bound_client():
    with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "test-key"}):
        with patch("autodev.llm.client.anthropic"):
            client = LLMClientFactory.create("claude-3-5-haiku-latest")

    assert isinstance(client, AnthropicLLMClient)
    assert client.model == "claude-3-5-haiku-latest"


def test_factory_falls_back_to_available_provider():
    with patch.dict(os.environ, {"OPENAI_API_KEY": "test-key"}, clear=True):
        with patch("autodev.llm.client.openai"):
            client = LLMClientFactory.create("local-model")

    assert isinstance(client, OpenAILLMClient)


def test_factory_is_available():
    with patch.dict(os.environ, {"ANTHROPIC_API_KEY": "key"}):
        assert LLMClientFactory.is_available() is True

    with patch.dict(os.environ, {}, clear=True):
        assert LLMClientFactory.is_available() is False
