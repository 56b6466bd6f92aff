"""
Retry engine with error classification, backoff and circuit breaking.

This package decides whether a failed structured-generation call is
retried, how long to wait, and whether to stop calling a failing
dependency altogether:

1. **Error Classifier**: failure -> RetryDecision (retryable or terminal)
2. **Backoff Calculator**: attempt number -> delay (ms), with jitter
3. **Circuit Breaker**: CLOSED / OPEN / HALF_OPEN gate on consecutive failures
4. **Retry Engine**: bounded attempt loop composing the three

Main Components:
    - RetryEngine: Orchestrates attempts, waits and breaker updates
    - CircuitBreaker: Thread-safe three-state breaker
    - classify_error: Message-based error classification
    - calculate_backoff: Exponential backoff with optional jitter
    - RetryError and subclasses: Terminal failures carrying RetryMetadata

Usage:
    >>> from llm_resilience.retry import RetryEngine, CircuitBreaker
    >>> engine = RetryEngine(config, CircuitBreaker())
    >>> result = await engine.run(lambda: client.generate(request))
"""

from llm_resilience.retry.backoff import calculate_backoff
from llm_resilience.retry.circuit_breaker import CircuitBreaker
from llm_resilience.retry.classifier import classify_error, describe_error
from llm_resilience.retry.engine import RetryEngine, run_with_retry
from llm_resilience.retry.exceptions import (
    CircuitOpenError,
    NonRetryableError,
    RetryCancelled,
    RetryError,
    RetryExhausted,
)
from llm_resilience.retry.metadata import RetryMetadata

__all__ = [
    "calculate_backoff",
    "CircuitBreaker",
    "classify_error",
    "describe_error",
    "RetryEngine",
    "run_with_retry",
    "CircuitOpenError",
    "NonRetryableError",
    "RetryCancelled",
    "RetryError",
    "RetryExhausted",
    "RetryMetadata",
]
