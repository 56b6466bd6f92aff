"""
Custom exceptions for the LLM client layer.

The retry engine classifies failures by their message text, so every
exception here renders its kind into its message: a status code, "timeout",
"rate limit", "schema", ... Each class provides a default message that
classifies correctly when the caller does not pass one.
"""

from typing import Optional


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """

    default_message = "LLM client error"

    def __init__(self, message: Optional[str] = None, details: dict | None = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status reported by the provider, when known."""
        return self.details.get("status")


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to reach the LLM provider.

    Includes network errors, DNS failures, refused connections, etc.
    Classified as NETWORK_ERROR and retried with exponential backoff.
    """

    default_message = "Network error: unable to reach LLM provider"


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when a request exceeds its timeout.

    Classified as NETWORK_ERROR.
    """

    default_message = "Network timeout waiting for LLM provider"


class LLMRateLimitError(LLMClientError):
    """
    Raised when the provider rate-limits the request (HTTP 429, quota).

    Classified as RATE_LIMIT and retried after a fixed delay.
    """

    default_message = "429 rate limit exceeded"


class LLMServerError(LLMClientError):
    """
    Raised when the provider fails server-side (HTTP 5xx, overloaded).

    Classified as SERVER_ERROR and retried with exponential backoff.
    """

    default_message = "500 internal server error from LLM provider"


class LLMAuthenticationError(LLMClientError):
    """
    Raised on rejected credentials (HTTP 401/403).

    Classified as CLIENT_ERROR; never retried.
    """

    default_message = "401 unauthorized: LLM provider rejected credentials"


class LLMModelNotAvailableError(LLMClientError):
    """
    Raised when the requested model does not exist on the provider (HTTP 404).

    Classified as CLIENT_ERROR; never retried.
    """

    default_message = "404 model not found"


class LLMSchemaViolationError(LLMClientError):
    """
    Raised when the output can't be parsed or doesn't match the requested schema.

    Classified as VALIDATION; never retried.
    """

    default_message = "Structured output failed schema validation"


class LLMGenerationError(LLMClientError):
    """
    Raised for any other generation failure.

    The message decides the classification; without a recognizable hint it
    is UNKNOWN and retried.
    """

    default_message = "Generation failed"
