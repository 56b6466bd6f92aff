"""
Unit tests for retry configuration models and merging.
"""

import pytest
from pydantic import ValidationError

from llm_resilience.models.enums import ErrorType
from llm_resilience.models.retry_models import (
    DEFAULT_CIRCUIT_BREAKER_CONFIG,
    DEFAULT_RETRY_CONFIG,
    CircuitBreakerConfig,
    RetryConfig,
    RetryDecision,
    merge_circuit_breaker_config,
    merge_retry_config,
)


# ============================================================================
# Defaults
# ============================================================================


def test_retry_config_defaults():
    config = RetryConfig()

    assert config.max_attempts == 3
    assert config.initial_delay == 1000
    assert config.max_delay == 30000
    assert config.backoff_factor == 2.0
    assert config.jitter is True
    assert config.on_error is None
    assert config.circuit_breaker == CircuitBreakerConfig()


def test_circuit_breaker_config_defaults():
    config = CircuitBreakerConfig()

    assert config.failure_threshold == 5
    assert config.reset_timeout == 30000
    assert config.enabled is True


def test_configs_are_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_RETRY_CONFIG.max_attempts = 10

    with pytest.raises(ValidationError):
        DEFAULT_CIRCUIT_BREAKER_CONFIG.failure_threshold = 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_attempts": 0},
        {"initial_delay": -1},
        {"max_delay": -5},
        {"backoff_factor": 0},
        {"retries": 3},
    ],
)
def test_retry_config_rejects_invalid_values(overrides):
    with pytest.raises(ValidationError):
        RetryConfig(**overrides)


def test_circuit_breaker_config_rejects_zero_threshold():
    with pytest.raises(ValidationError):
        CircuitBreakerConfig(failure_threshold=0)


def test_retry_decision_rejects_negative_delay():
    with pytest.raises(ValidationError):
        RetryDecision(
            should_retry=True, error_type=ErrorType.RATE_LIMIT, reason="x", custom_delay=-1
        )


# ============================================================================
# merge_retry_config
# ============================================================================


def test_merge_none_returns_defaults():
    assert merge_retry_config(None) == DEFAULT_RETRY_CONFIG


def test_merge_partial_mapping():
    merged = merge_retry_config({"max_attempts": 5})

    assert merged.max_attempts == 5
    assert merged.initial_delay == DEFAULT_RETRY_CONFIG.initial_delay
    assert merged.circuit_breaker == DEFAULT_RETRY_CONFIG.circuit_breaker


def test_merge_partial_model_uses_only_explicit_fields():
    defaults = RetryConfig(max_attempts=9, initial_delay=5)

    merged = merge_retry_config(RetryConfig(jitter=False), defaults)

    assert merged.max_attempts == 9
    assert merged.initial_delay == 5
    assert merged.jitter is False


def test_merge_nested_breaker_field_by_field():
    merged = merge_retry_config({"circuit_breaker": {"reset_timeout": 500}})

    assert merged.circuit_breaker.reset_timeout == 500
    assert merged.circuit_breaker.failure_threshold == 5
    assert merged.circuit_breaker.enabled is True


def test_merge_explicit_none_breaker():
    merged = merge_retry_config({"circuit_breaker": None})

    assert merged.circuit_breaker is None


def test_merge_explicit_none_max_delay():
    merged = merge_retry_config({"max_delay": None})

    assert merged.max_delay is None


def test_merge_does_not_touch_defaults():
    before = DEFAULT_RETRY_CONFIG.model_dump()

    merge_retry_config({"max_attempts": 8, "circuit_breaker": {"enabled": False}})

    assert DEFAULT_RETRY_CONFIG.model_dump() == before


def test_merge_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        merge_retry_config({"retry_count": 2})

    with pytest.raises(ValidationError):
        merge_retry_config({"circuit_breaker": {"threshold": 2}})


def test_merge_keeps_on_error_hook():
    def hook(error, attempt):
        return None

    merged = merge_retry_config({"on_error": hook})

    assert merged.on_error is hook
    assert merge_retry_config({"max_attempts": 2}, merged).on_error is hook


def test_merge_circuit_breaker_config():
    merged = merge_circuit_breaker_config({"enabled": False})

    assert merged == CircuitBreakerConfig(enabled=False)
    assert merge_circuit_breaker_config(None) == DEFAULT_CIRCUIT_BREAKER_CONFIG


# ============================================================================
# from_settings
# ============================================================================


def test_retry_config_from_settings(test_settings):
    config = RetryConfig.from_settings(test_settings)

    assert config.max_attempts == 4
    assert config.initial_delay == 10
    assert config.max_delay == 100
    assert config.backoff_factor == 3.0
    assert config.jitter is False
    assert config.circuit_breaker == CircuitBreakerConfig(failure_threshold=2, reset_timeout=250)
