"""
Data models for the resilience layer.

- enums: ErrorType, CircuitBreakerState, TerminalReason
- retry_models: RetryConfig, CircuitBreakerConfig, RetryDecision and defaults
- llm_models: structured-generation request/response
"""

from llm_resilience.models.enums import CircuitBreakerState, ErrorType, TerminalReason
from llm_resilience.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from llm_resilience.models.retry_models import (
    DEFAULT_CIRCUIT_BREAKER_CONFIG,
    DEFAULT_RETRY_CONFIG,
    CircuitBreakerConfig,
    OnErrorHook,
    RetryConfig,
    RetryDecision,
    merge_circuit_breaker_config,
    merge_retry_config,
)

__all__ = [
    "CircuitBreakerState",
    "ErrorType",
    "TerminalReason",
    "LLMGenerationRequest",
    "LLMGenerationResponse",
    "DEFAULT_CIRCUIT_BREAKER_CONFIG",
    "DEFAULT_RETRY_CONFIG",
    "CircuitBreakerConfig",
    "OnErrorHook",
    "RetryConfig",
    "RetryDecision",
    "merge_circuit_breaker_config",
    "merge_retry_config",
]
