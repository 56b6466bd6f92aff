"""
Retry engine exceptions.

Every top-level call through the retry engine either returns a result or
raises exactly one of these terminal failures:

- NonRetryableError: the failure was classified as terminal (validation, 4xx)
- RetryExhausted: retryable failures used up the attempt budget
- CircuitOpenError: the circuit breaker refused the call, no attempt was made
- RetryCancelled: the caller's cancel signal fired before the loop finished

The underlying exception (if any) is chained as ``__cause__`` and kept on
``last_error``.
"""

from typing import Optional

from llm_resilience.models.enums import ErrorType, TerminalReason
from llm_resilience.retry.metadata import RetryMetadata


class RetryError(Exception):
    """
    Base exception for terminal retry failures.

    Attributes:
        message: Human-readable description
        last_error: Last exception raised by the attempt (None if none ran)
        metadata: Retry summary (attempts, error type, reason, latency)
    """

    def __init__(
        self,
        message: str,
        metadata: RetryMetadata,
        last_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.metadata = metadata
        self.last_error = last_error

    @property
    def attempts(self) -> int:
        return self.metadata.attempts

    @property
    def error_type(self) -> Optional[ErrorType]:
        return self.metadata.error_type

    @property
    def reason(self) -> str:
        return self.metadata.reason

    @property
    def terminal_reason(self) -> TerminalReason:
        return self.metadata.terminal_reason


class NonRetryableError(RetryError):
    """Raised when a failure is classified as not retryable."""

    def __init__(self, metadata: RetryMetadata, last_error: BaseException) -> None:
        super().__init__(
            f"Non-retryable {metadata.error_type.value if metadata.error_type else 'unknown'} "
            f"error on attempt {metadata.attempts}: {last_error}",
            metadata=metadata,
            last_error=last_error,
        )


class RetryExhausted(RetryError):
    """Raised when every allowed attempt failed with a retryable error."""

    def __init__(self, metadata: RetryMetadata, last_error: BaseException) -> None:
        super().__init__(
            f"All {metadata.attempts} attempts failed. "
            f"Final error ({metadata.error_type.value if metadata.error_type else 'unknown'}): {last_error}",
            metadata=metadata,
            last_error=last_error,
        )


class CircuitOpenError(RetryError):
    """
    Raised when the circuit breaker blocks a call.

    Distinct from RetryExhausted: the blocked call itself was never made.
    ``metadata.attempts`` counts attempts made earlier in the same sequence.
    """

    def __init__(
        self,
        metadata: RetryMetadata,
        last_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            "Circuit breaker is OPEN - service is temporarily unavailable",
            metadata=metadata,
            last_error=last_error,
        )


class RetryCancelled(RetryError):
    """Raised when the caller's cancel signal stops the retry loop."""

    def __init__(
        self,
        metadata: RetryMetadata,
        last_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            f"Retry cancelled after {metadata.attempts} attempts",
            metadata=metadata,
            last_error=last_error,
        )
