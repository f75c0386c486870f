"""LLMClient — prompt in, completion text out, whichever vendor is configured."""

from __future__ import annotations

from intentzero.providers.base import AgentProvider
from intentzero.providers.config import LLMConfiguration
from intentzero.providers.pydantic_ai import PydanticAIProvider


class LLMError(Exception):
    """Language-model call failed or returned nothing usable."""

    def __init__(self, message: str) -> None:
        """Initialize LLMError with a message."""
        self.message = message
        super().__init__(message)


class LLMClient:
    """Thin text-completion client over an AgentProvider."""

    def __init__(
        self,
        provider: AgentProvider[str, None],
        configuration: LLMConfiguration | None = None,
    ) -> None:
        self.provider = provider
        self.configuration = configuration

    @classmethod
    def from_configuration(cls, configuration: LLMConfiguration) -> LLMClient:
        """Build a client backed by pydantic-ai for the configured vendor."""
        provider: PydanticAIProvider[str, None] = PydanticAIProvider(
            model=configuration.build_model(),
            output_type=str,
            model_settings={
                "temperature": configuration.temperature,
                "max_tokens": configuration.effective_max_tokens,
            },
        )
        return cls(provider=provider, configuration=configuration)

    @classmethod
    def from_environment(cls) -> LLMClient | None:
        """Build a client from LLM_* variables, or None when unconfigured."""
        configuration = LLMConfiguration.from_environment()
        if configuration is None:
            return None
        return cls.from_configuration(configuration)

    async def generate_response(self, prompt: str) -> str:
        """Send prompt and return the trimmed completion.

        Raises:
            LLMError: If the call fails or the completion is empty.
        """
        try:
            result = await self.provider.invoke(prompt)
        except Exception as e:
            raise LLMError(f"LLM 응답 오류: {e}") from e

        text = str(result.output).strip()
        if not text:
            raise LLMError("LLM 응답을 해석할 수 없습니다.")
        return text
