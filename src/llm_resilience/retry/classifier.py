"""
Error classification for retry decisions.

Failures are classified from their rendered text, so any error surfaced to
this layer should mention its kind (status code, "timeout", "rate limit",
...) in its message. Unrecognized errors are retried with exponential
backoff.

Priority order (first match wins):
    1. VALIDATION     - not retryable
    2. RATE_LIMIT     - retryable, fixed 5s delay
    3. CLIENT_ERROR   - not retryable (4xx)
    4. SERVER_ERROR   - retryable (5xx)
    5. NETWORK_ERROR  - retryable
    6. UNKNOWN        - retryable
"""

import re

from llm_resilience.models.enums import ErrorType
from llm_resilience.models.retry_models import RetryDecision

RATE_LIMIT_DELAY_MS = 5000

VALIDATION_PATTERNS = ("validation", "schema", "parse", "invalid input", "zoderror")
RATE_LIMIT_PATTERNS = ("429", "rate limit", "too many requests", "quota exceeded")
CLIENT_ERROR_PATTERNS = ("unauthorized", "forbidden")
SERVER_ERROR_PATTERNS = (
    "internal server error",
    "bad gateway",
    "service unavailable",
    "gateway timeout",
)
NETWORK_PATTERNS = ("timeout", "network", "connection", "econnreset", "enotfound", "etimedout")

# Bare status codes only: "4000ms", "req-5031" or ":443" must not match
_CLIENT_STATUS_RE = re.compile(r"(?<![\w.:/])4\d\d(?!\w)")
_SERVER_STATUS_RE = re.compile(r"(?<![\w.:/])5\d\d(?!\w)")

_DECISIONS = {
    ErrorType.VALIDATION: RetryDecision(
        should_retry=False,
        error_type=ErrorType.VALIDATION,
        reason="Validation errors are not retryable",
    ),
    ErrorType.RATE_LIMIT: RetryDecision(
        should_retry=True,
        error_type=ErrorType.RATE_LIMIT,
        custom_delay=RATE_LIMIT_DELAY_MS,
        reason="Rate limit error - using linear delay strategy",
    ),
    ErrorType.CLIENT_ERROR: RetryDecision(
        should_retry=False,
        error_type=ErrorType.CLIENT_ERROR,
        reason="Client errors (4xx) are not retryable",
    ),
    ErrorType.SERVER_ERROR: RetryDecision(
        should_retry=True,
        error_type=ErrorType.SERVER_ERROR,
        reason="Server error - using exponential backoff",
    ),
    ErrorType.NETWORK_ERROR: RetryDecision(
        should_retry=True,
        error_type=ErrorType.NETWORK_ERROR,
        reason="Network error - using exponential backoff",
    ),
    ErrorType.UNKNOWN: RetryDecision(
        should_retry=True,
        error_type=ErrorType.UNKNOWN,
        reason="Unknown error type - using exponential backoff as fallback",
    ),
}


def describe_error(error: BaseException) -> str:
    """
    Render an exception as the lowercase text the classifier matches on.

    The class name is included so exceptions with an empty message
    (``TimeoutError()``) or a telling type (``ValidationError``) still
    classify.
    """
    return f"{type(error).__name__}: {error}".lower()


def _contains_any(text: str, patterns: tuple[str, ...]) -> bool:
    return any(pattern in text for pattern in patterns)


def classify_description(description: str) -> ErrorType:
    """Map a normalized error description to an ErrorType."""
    text = description.lower()

    if _contains_any(text, VALIDATION_PATTERNS):
        return ErrorType.VALIDATION
    if _contains_any(text, RATE_LIMIT_PATTERNS):
        return ErrorType.RATE_LIMIT
    if _CLIENT_STATUS_RE.search(text) or _contains_any(text, CLIENT_ERROR_PATTERNS):
        return ErrorType.CLIENT_ERROR
    if _SERVER_STATUS_RE.search(text) or _contains_any(text, SERVER_ERROR_PATTERNS):
        return ErrorType.SERVER_ERROR
    if _contains_any(text, NETWORK_PATTERNS):
        return ErrorType.NETWORK_ERROR
    return ErrorType.UNKNOWN


def decision_for(error_type: ErrorType) -> RetryDecision:
    """Canonical RetryDecision for an error type."""
    return _DECISIONS[error_type]


def classify_error(error: BaseException, attempt: int) -> RetryDecision:
    """
    Decide whether a failed attempt should be retried.

    Args:
        error: Exception raised by the attempt
        attempt: 1-based attempt number (does not influence the decision)

    Returns:
        RetryDecision for the error's classified type
    """
    return decision_for(classify_description(describe_error(error)))
