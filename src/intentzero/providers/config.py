"""Language-model configuration read from the environment.

LLM_PROVIDER: openai/gpt or anthropic/claude (anything else means openai)
LLM_API_KEY: required; without it no client is configured
LLM_MODEL: model name (per-provider default)
LLM_BASE_URL: optional API base URL override
"""

import os
from enum import StrEnum

from pydantic import BaseModel, ConfigDict
from pydantic_ai.models import Model


class LLMProvider(StrEnum):
    """Supported model vendors."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


_PROVIDER_ALIASES: dict[str, LLMProvider] = {
    "openai": LLMProvider.OPENAI,
    "gpt": LLMProvider.OPENAI,
    "anthropic": LLMProvider.ANTHROPIC,
    "claude": LLMProvider.ANTHROPIC,
}

DEFAULT_MODELS: dict[LLMProvider, str] = {
    LLMProvider.OPENAI: "gpt-4o-mini",
    LLMProvider.ANTHROPIC: "claude-3-5-sonnet-20240620",
}

DEFAULT_MAX_TOKENS: dict[LLMProvider, int] = {
    LLMProvider.OPENAI: 600,
    LLMProvider.ANTHROPIC: 800,
}


class LLMConfiguration(BaseModel):
    """Credentials and sampling settings for one model."""

    provider: LLMProvider
    api_key: str
    model: str
    base_url: str | None = None
    temperature: float = 0.2
    max_tokens: int | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def effective_max_tokens(self) -> int:
        """max_tokens, or the provider default when unset."""
        if self.max_tokens is not None:
            return self.max_tokens
        return DEFAULT_MAX_TOKENS[self.provider]

    @classmethod
    def from_environment(cls) -> "LLMConfiguration | None":
        """Build configuration from LLM_* variables, or None without a key."""
        provider_raw = os.environ.get("LLM_PROVIDER", "").strip().lower()
        api_key = os.environ.get("LLM_API_KEY", "")
        if not provider_raw or not api_key:
            return None

        provider = _PROVIDER_ALIASES.get(provider_raw, LLMProvider.OPENAI)
        model = os.environ.get("LLM_MODEL") or DEFAULT_MODELS[provider]
        base_url = os.environ.get("LLM_BASE_URL") or None
        return cls(provider=provider, api_key=api_key, model=model, base_url=base_url)

    def build_model(self) -> Model:
        """Create the pydantic-ai model for this configuration."""
        options: dict[str, str] = {"api_key": self.api_key}
        if self.base_url:
            options["base_url"] = self.base_url

        if self.provider == LLMProvider.ANTHROPIC:
            from pydantic_ai.models.anthropic import AnthropicModel
            from pydantic_ai.providers.anthropic import AnthropicProvider

            return AnthropicModel(self.model, provider=AnthropicProvider(**options))

        from pydantic_ai.models.openai import OpenAIChatModel
        from pydantic_ai.providers.openai import OpenAIProvider

        return OpenAIChatModel(self.model, provider=OpenAIProvider(**options))
