"""Tests for LLMClient."""

from typing import Any

import pytest
from pydantic_ai.models.test import TestModel

from intentzero.providers.base import AgentProvider, AgentResult
from intentzero.providers.client import LLMClient, LLMError
from intentzero.providers.pydantic_ai import PydanticAIProvider


class FailingProvider(AgentProvider[str, None]):
    """Provider that always raises."""

    async def invoke(
        self, prompt: str, dependencies: None = None, **kwargs: Any
    ) -> AgentResult[str]:
        raise ConnectionError("network down")


def _client(text: str) -> LLMClient:
    provider: PydanticAIProvider[str, None] = PydanticAIProvider(
        model=TestModel(custom_output_text=text), output_type=str
    )
    return LLMClient(provider=provider)


class TestLLMClient:
    """Test completion handling."""

    async def test_trimmed_response(self) -> None:
        assert await _client("  답변입니다.  ").generate_response("prompt") == "답변입니다."

    async def test_empty_response(self) -> None:
        with pytest.raises(LLMError, match="해석할 수 없습니다"):
            await _client("   ").generate_response("prompt")

    async def test_provider_failure_wrapped(self) -> None:
        client = LLMClient(provider=FailingProvider())

        with pytest.raises(LLMError) as exc_info:
            await client.generate_response("prompt")

        assert "network down" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestFactories:
    """Test client construction from configuration."""

    def test_from_environment_unconfigured(self) -> None:
        assert LLMClient.from_environment() is None

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_PROVIDER", "claude")
        monkeypatch.setenv("LLM_API_KEY", "key")

        client = LLMClient.from_environment()
        assert client is not None
        assert client.configuration is not None
        assert client.configuration.provider == "anthropic"
        assert isinstance(client.provider, PydanticAIProvider)
