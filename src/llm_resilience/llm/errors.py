"""
Normalization of provider and transport errors.

Adapters can raise whatever their transport raises; ``to_llm_error`` turns
it into an LLMClientError whose message the retry classifier understands.
Response bodies go into ``details``, never into the message, so provider
prose can't change the classification.
"""

import json

import httpx
from pydantic import ValidationError as PydanticValidationError

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

# Keep details small enough for log lines
_BODY_SNIPPET_CHARS = 500


def _from_status_error(error: httpx.HTTPStatusError) -> LLMClientError:
    status = error.response.status_code
    details = {
        "status": status,
        "url": str(error.request.url),
        "body": error.response.text[:_BODY_SNIPPET_CHARS],
    }

    if status == 429:
        return LLMRateLimitError("429 rate limit exceeded", details=details)
    if status == 401:
        return LLMAuthenticationError("401 unauthorized", details=details)
    if status == 403:
        return LLMAuthenticationError("403 forbidden", details=details)
    if status == 404:
        return LLMModelNotAvailableError("404 model or endpoint not found", details=details)
    if 400 <= status < 500:
        return LLMGenerationError(f"{status} client error from LLM provider", details=details)
    if status >= 500:
        return LLMServerError(f"{status} server error from LLM provider", details=details)
    return LLMGenerationError(f"Unexpected HTTP status {status}", details=details)


def to_llm_error(error: BaseException) -> LLMClientError:
    """
    Convert an arbitrary exception into a classifiable LLMClientError.

    Args:
        error: Exception raised by a provider adapter

    Returns:
        ``error`` itself if it already is an LLMClientError, otherwise a new
        LLMClientError subclass instance (the caller should chain it with
        ``raise ... from error``)
    """
    if isinstance(error, LLMClientError):
        return error

    error_type = type(error).__name__

    if isinstance(error, httpx.HTTPStatusError):
        return _from_status_error(error)

    if isinstance(error, (httpx.TimeoutException, TimeoutError)):
        return LLMTimeoutError(
            f"Network timeout: {error}" if str(error) else None,
            details={"error_type": error_type},
        )

    if isinstance(error, (httpx.TransportError, ConnectionError)):
        return LLMConnectionError(
            f"Network error: {error}",
            details={"error_type": error_type},
        )

    if isinstance(error, json.JSONDecodeError):
        return LLMSchemaViolationError(
            f"Failed to parse structured output: {error.msg}",
            details={"parse_error": str(error), "position": error.pos},
        )

    if isinstance(error, PydanticValidationError):
        return LLMSchemaViolationError(
            f"Schema validation failed with {error.error_count()} errors",
            details={"errors": error.errors(include_url=False)},
        )

    return LLMGenerationError(
        f"Unexpected {error_type}: {error}",
        details={"error_type": error_type},
    )
