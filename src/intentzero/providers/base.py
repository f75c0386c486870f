"""Core provider abstractions.

- TokenUsage: token counts for one invocation
- AgentResult: structured output from agent invocations
- AgentProvider: abstract base class for provider implementations

No pydantic-ai dependency here.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict


class TokenUsage(BaseModel):
    """Token counts reported by the model."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    requests: int = 1

    model_config = ConfigDict(frozen=True)


class AgentResult[OutputT](BaseModel):
    """Result from an agent invocation."""

    output: OutputT
    usage: TokenUsage
    model: str
    provider: str
    duration_ms: int


class AgentProvider[OutputT, DepsT](ABC):
    """Abstract base class for agent providers.

    Generic over:
    - OutputT: type of agent output (str, BaseModel subclass, etc.)
    - DepsT: type of dependencies passed to agent (or None)
    """

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        dependencies: DepsT | None = None,
        **kwargs: object,
    ) -> AgentResult[OutputT]:
        """Invoke the agent with a prompt.

        Args:
            prompt: User prompt to send to the agent
            dependencies: Optional dependencies to pass to agent runtime
            **kwargs: Additional provider-specific arguments

        Returns:
            AgentResult with typed output, usage stats, and metadata
        """
        ...
