"""Pydantic AI provider implementation.

Wraps a Pydantic AI Agent with timing and usage mapping.
"""

import time
from typing import Any

from pydantic_ai import Agent
from pydantic_ai.models import KnownModelName, Model
from pydantic_ai.models.test import TestModel
from pydantic_ai.settings import ModelSettings

from intentzero.providers.base import AgentProvider, AgentResult, TokenUsage


class PydanticAIProvider[OutputT, DepsT](AgentProvider[OutputT, DepsT]):
    """Pydantic AI implementation of AgentProvider.

    Example:
        provider = PydanticAIProvider(
            model="openai:gpt-4o-mini",
            output_type=str,
            model_settings={"temperature": 0.2, "max_tokens": 600},
        )
    """

    def __init__(
        self,
        model: Model | KnownModelName | TestModel | str,
        output_type: type[OutputT],
        system_prompt: str = "",
        model_settings: ModelSettings | None = None,
    ) -> None:
        """Initialize provider with model and output type.

        Args:
            model: Pydantic AI model (Model instance, shorthand string, or TestModel)
            output_type: Type of structured output (str, BaseModel subclass, etc.)
            system_prompt: Optional system prompt for the agent
            model_settings: Optional sampling settings (temperature, max_tokens)
        """
        self._agent: Agent[DepsT, OutputT] = Agent(
            model=model,
            output_type=output_type,
            system_prompt=system_prompt,
            model_settings=model_settings,
        )
        self._model_name, self._provider_name = self._parse_model_name(model)

    def _parse_model_name(
        self, model: Model | KnownModelName | TestModel | str
    ) -> tuple[str, str]:
        """Extract (model_name, provider_name) from a model identifier."""
        if isinstance(model, TestModel):
            return ("test", "test")

        if isinstance(model, str):
            if ":" in model:
                provider, model_name = model.split(":", 1)
                return (model_name, provider)
            return (model, "unknown")

        return (model.model_name, model.system)

    async def invoke(
        self,
        prompt: str,
        dependencies: DepsT | None = None,
        **kwargs: Any,
    ) -> AgentResult[OutputT]:
        """Invoke the agent with a prompt.

        Args:
            prompt: User prompt
            dependencies: Optional dependencies for agent
            **kwargs: Additional arguments (passed to agent.run)

        Returns:
            AgentResult with output, usage, and timing
        """
        start = time.monotonic()
        if dependencies is not None:
            result = await self._agent.run(prompt, deps=dependencies, **kwargs)
        else:
            result = await self._agent.run(prompt, **kwargs)
        duration_ms = int((time.monotonic() - start) * 1000)

        run_usage = result.usage()
        usage = TokenUsage(
            input_tokens=run_usage.input_tokens or 0,
            output_tokens=run_usage.output_tokens or 0,
            total_tokens=run_usage.total_tokens or 0,
            requests=run_usage.requests or 1,
        )

        return AgentResult(
            output=result.output,
            usage=usage,
            model=self._model_name,
            provider=self._provider_name,
            duration_ms=duration_ms,
        )
