"""LLM access for the intelligence source.

A client is bound to one model when it is created. Callers that expect
structured output pass the reply through parse_json_object().
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

try:
    import anthropic
except ImportError:
    anthropic = None

try:
    import openai
except ImportError:
    openai = None

logger = logging.getLogger(__name__)


class LLMResponseError(ValueError):
    """Model reply could not be turned into the expected structure."""

    pass


@dataclass
class LLMResponse:
    """One completion."""

    content: str
    model: str
    tokens_used: int


class LLMClient(ABC):
    """Completion client for a single model."""

    provider: str = ""

    def __init__(self, model: str, max_tokens: int = 1000, temperature: float = 0.0):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    @abstractmethod
    async def complete(self, prompt: str, system: str | None = None) -> LLMResponse:
        """Send one user prompt, optionally with a system prompt."""
        pass


class AnthropicLLMClient(LLMClient):
    provider = "anthropic"

    def __init__(self, api_key: str, model: str, **kwargs: Any):
        if anthropic is None:
            raise ImportError("anthropic package is required for AnthropicLLMClient (pip install autodev[llm])")
        super().__init__(model, **kwargs)
        self.client = anthropic.AsyncAnthropic(api_key=api_key)

    async def complete(self, prompt: str, system: str | None = None) -> LLMResponse:
        request: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request["system"] = system

        response = await self.client.messages.create(**request)
        text = "".join(getattr(block, "text", "") for block in response.content)
        return LLMResponse(
            content=text,
            model=self.model,
            tokens_used=response.usage.input_tokens + response.usage.output_tokens,
        )


class OpenAILLMClient(LLMClient):
    provider = "openai"

    def __init__(self, api_key: str, model: str, **kwargs: Any):
        if openai is None:
            raise ImportError("openai package is required for OpenAILLMClient (pip install autodev[llm])")
        super().__init__(model, **kwargs)
        self.client = openai.AsyncOpenAI(api_key=api_key)

    async def complete(self, prompt: str, system: str | None = None) -> LLMResponse:
        messages = [{"role": "system", "content": system}] if system else []
        messages.append({"role": "user", "content": prompt})

        response = await self.client.chat.completions.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=messages,
        )
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=self.model,
            tokens_used=response.usage.total_tokens if response.usage else 0,
        )


def parse_json_object(content: str) -> dict:
    """Decode a reply that should hold one JSON object, tolerating a code fence"""
    text = content.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        last_fence = text.rfind("```")
        if first_newline != -1 and last_fence > first_newline:
            text = text[first_newline + 1 : last_fence].strip()

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"Invalid JSON response: {e}") from e
    if not isinstance(data, dict):
        raise LLMResponseError(f"Expected JSON object, got {type(data).__name__}")
    return data


# provider name, API key variable, model name prefix
PROVIDERS: list[tuple[str, str, str]] = [
    ("anthropic", "ANTHROPIC_API_KEY", "claude-"),
    ("openai", "OPENAI_API_KEY", "gpt-"),
]

CLIENT_CLASSES: dict[str, type[LLMClient]] = {
    "anthropic": AnthropicLLMClient,
    "openai": OpenAILLMClient,
}


class LLMClientFactory:
    """Builds a client from the model name and whichever API key is set.

    Returns None instead of raising when no key is configured, so callers
    can fall back to a non-LLM path.
    """

    @classmethod
    def create(cls, model: str, preferred_provider: str | None = None) -> LLMClient | None:
        provider = preferred_provider or cls._infer_provider(model) or cls._find_available_provider()
        if provider is None:
            logger.warning("No LLM provider available (no API keys found)")
            return None

        env_var = next(var for name, var, _ in PROVIDERS if name == provider)
        api_key = os.getenv(env_var)
        if not api_key:
            logger.warning("No API key found for %s (set %s)", provider, env_var)
            return None

        logger.info("Using %s model %s for intelligence gathering", provider, model)
        return CLIENT_CLASSES[provider](api_key, model)

    @staticmethod
    def _infer_provider(model: str) -> str | None:
        return next((name for name, _, prefix in PROVIDERS if model.startswith(prefix)), None)

    @staticmethod
    def _find_available_provider() -> str | None:
        return next((name for name, env_var, _ in PROVIDERS if os.getenv(env_var)), None)

    @classmethod
    def is_available(cls) -> bool:
        return cls._find_available_provider() is not None
