"""
Retry and circuit breaker configuration models.

Configs are frozen pydantic models. Caller overrides are merged with the
immutable defaults field by field (override wins), so a partial override
never blanks out a field it did not mention.
"""

from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from llm_resilience.models.enums import ErrorType

if TYPE_CHECKING:
    from llm_resilience.config import Settings


OnErrorHook = Callable[..., Any]
"""Hook called before each retry wait with the failure that triggered it.

Called as ``on_error(error, attempt)``, or as ``on_error(error)`` when it takes
a single positional parameter. May be a plain function or a coroutine
function. It only observes: the return value is ignored, so it can neither
override the delay nor stop the loop. Use ``cancel_event`` to stop early.
"""


class CircuitBreakerConfig(BaseModel):
    """
    Circuit breaker configuration.

    Attributes:
        failure_threshold: Consecutive failures that trip the circuit
        reset_timeout: Milliseconds to stay OPEN before allowing a trial call
        enabled: When False the breaker never blocks and never changes state
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    failure_threshold: int = Field(default=5, ge=1, description="Failures before tripping to OPEN")
    reset_timeout: int = Field(default=30000, ge=0, description="OPEN -> HALF_OPEN wait (ms)")
    enabled: bool = Field(default=True, description="Enable circuit breaker functionality")


class RetryConfig(BaseModel):
    """
    Retry configuration with exponential backoff and jitter.

    All delays are in milliseconds.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    max_attempts: int = Field(default=3, ge=1, description="Maximum number of attempts (first call included)")
    initial_delay: int = Field(default=1000, ge=0, description="Delay before the first retry (ms)")
    max_delay: Optional[int] = Field(default=30000, ge=0, description="Ceiling for computed delays (ms)")
    backoff_factor: float = Field(default=2.0, gt=0, description="Exponential growth base")
    jitter: bool = Field(default=True, description="Apply +/-25% random jitter to delays")
    circuit_breaker: Optional[CircuitBreakerConfig] = Field(
        default_factory=CircuitBreakerConfig,
        description="Circuit breaker configuration (None disables the breaker)",
    )
    on_error: Optional[OnErrorHook] = Field(
        default=None,
        description="Best-effort observer for retryable failures",
    )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RetryConfig":
        """Build a config from environment-driven settings."""
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            initial_delay=settings.RETRY_INITIAL_DELAY_MS,
            max_delay=settings.RETRY_MAX_DELAY_MS,
            backoff_factor=settings.RETRY_BACKOFF_FACTOR,
            jitter=settings.RETRY_JITTER,
            circuit_breaker=CircuitBreakerConfig(
                failure_threshold=settings.CIRCUIT_BREAKER_FAILURE_THRESHOLD,
                reset_timeout=settings.CIRCUIT_BREAKER_RESET_TIMEOUT_MS,
                enabled=settings.CIRCUIT_BREAKER_ENABLED,
            ),
        )


class RetryDecision(BaseModel):
    """
    Outcome of classifying a failed attempt.

    ``custom_delay`` (ms) replaces the exponential backoff when set.
    """
    model_config = ConfigDict(frozen=True)

    should_retry: bool
    error_type: ErrorType
    reason: str
    custom_delay: Optional[int] = Field(default=None, ge=0)


DEFAULT_CIRCUIT_BREAKER_CONFIG = CircuitBreakerConfig()
DEFAULT_RETRY_CONFIG = RetryConfig()


ConfigOverrides = Union[BaseModel, Mapping[str, Any], None]


def _explicit_fields(overrides: ConfigOverrides) -> dict[str, Any]:
    """Return only the fields the caller actually specified."""
    if overrides is None:
        return {}
    if isinstance(overrides, BaseModel):
        return {name: getattr(overrides, name) for name in overrides.model_fields_set}
    return dict(overrides)


def merge_circuit_breaker_config(
    overrides: ConfigOverrides = None,
    defaults: CircuitBreakerConfig = DEFAULT_CIRCUIT_BREAKER_CONFIG,
) -> CircuitBreakerConfig:
    """Merge a partial breaker config over ``defaults``."""
    merged = defaults.model_dump()
    merged.update(_explicit_fields(overrides))
    return CircuitBreakerConfig.model_validate(merged)


def merge_retry_config(
    overrides: ConfigOverrides = None,
    defaults: RetryConfig = DEFAULT_RETRY_CONFIG,
) -> RetryConfig:
    """
    Merge a partial retry config over ``defaults``.

    Args:
        overrides: RetryConfig (only explicitly set fields count), mapping, or None
        defaults: Base config, left untouched

    Returns:
        New RetryConfig with every unspecified field taken from ``defaults``

    Raises:
        pydantic.ValidationError: Unknown field or out-of-range value
    """
    merged = {name: getattr(defaults, name) for name in RetryConfig.model_fields}
    explicit = _explicit_fields(overrides)

    if "circuit_breaker" in explicit:
        breaker_overrides = explicit.pop("circuit_breaker")
        if breaker_overrides is None:
            merged["circuit_breaker"] = None
        else:
            base_breaker = defaults.circuit_breaker or DEFAULT_CIRCUIT_BREAKER_CONFIG
            merged["circuit_breaker"] = merge_circuit_breaker_config(breaker_overrides, base_breaker)

    merged.update(explicit)
    return RetryConfig.model_validate(merged)
