"""
Retry metadata tracking.

This module defines the RetryMetadata dataclass attached to every terminal
failure raised by the retry engine.
"""

from dataclasses import dataclass
from typing import Optional

from llm_resilience.models.enums import ErrorType, TerminalReason


@dataclass(frozen=True)
class RetryMetadata:
    """
    Summary of a retry sequence that ended without a result.

    Only counters are kept; individual attempts are not recorded.

    Attributes:
        attempts: Number of attempts actually invoked (0 if the circuit was open)
        terminal_reason: Why the sequence stopped
        error_type: Classification of the last failure (None if no attempt failed)
        reason: Human-readable explanation
        total_latency_ms: Time from the start of the sequence to the terminal failure
    """

    attempts: int
    terminal_reason: TerminalReason
    error_type: Optional[ErrorType]
    reason: str
    total_latency_ms: int = 0

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.attempts < 0:
            raise ValueError("attempts must be >= 0")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

        if self.terminal_reason in (TerminalReason.NON_RETRYABLE, TerminalReason.ATTEMPTS_EXHAUSTED):
            if self.attempts < 1:
                raise ValueError(f"{self.terminal_reason.value} requires at least one attempt")
            if self.error_type is None:
                raise ValueError(f"{self.terminal_reason.value} requires an error_type")
