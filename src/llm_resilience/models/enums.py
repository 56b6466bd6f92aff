"""
Enumerations for the resilience layer.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class ErrorType(str, Enum):
    """
    Classification of a failed attempt.

    VALIDATION and CLIENT_ERROR are terminal. The remaining types are
    retried until the attempt budget runs out.
    """

    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    CLIENT_ERROR = "client_error"
    UNKNOWN = "unknown"

    @property
    def is_retryable(self) -> bool:
        """Whether failures of this type are retried by default."""
        return self not in (ErrorType.VALIDATION, ErrorType.CLIENT_ERROR)


class CircuitBreakerState(str, Enum):
    """
    Circuit breaker states.

    CLOSED: normal operation, calls flow through
    OPEN: failing fast, no calls until the reset timeout elapses
    HALF_OPEN: trial call allowed to test recovery
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class TerminalReason(str, Enum):
    """Why a retry sequence stopped without a result."""

    NON_RETRYABLE = "non_retryable"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    CIRCUIT_OPEN = "circuit_open"
    CANCELLED = "cancelled"
