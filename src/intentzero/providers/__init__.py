"""IntentZero providers — language-model client layer."""

from intentzero.providers.base import AgentProvider, AgentResult, TokenUsage
from intentzero.providers.client import LLMClient, LLMError
from intentzero.providers.config import LLMConfiguration, LLMProvider
from intentzero.providers.pydantic_ai import PydanticAIProvider

__all__ = [
    "AgentProvider",
    "AgentResult",
    "LLMClient",
    "LLMConfiguration",
    "LLMError",
    "LLMProvider",
    "PydanticAIProvider",
    "TokenUsage",
]
