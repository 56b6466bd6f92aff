"""
LLM client abstraction and resilience facade.

Components:
- BaseLLMClient: Abstract base class for provider adapters
- ResilientLLMClient / create_client: Retry + circuit breaker around a provider
- to_llm_error: Normalizes transport/parse errors for classification
- exceptions: LLM-specific exceptions
"""

from llm_resilience.llm.base_client import BaseLLMClient
from llm_resilience.llm.client import ResilientLLMClient, create_client
from llm_resilience.llm.errors import to_llm_error
from llm_resilience.llm.exceptions import (
    LLMAuthenticationError,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMSchemaViolationError,
    LLMServerError,
    LLMTimeoutError,
)

__all__ = [
    "BaseLLMClient",
    "ResilientLLMClient",
    "create_client",
    "to_llm_error",
    "LLMAuthenticationError",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMModelNotAvailableError",
    "LLMRateLimitError",
    "LLMSchemaViolationError",
    "LLMServerError",
    "LLMTimeoutError",
]
