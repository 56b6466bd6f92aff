"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from llm_resilience.config import Settings
from llm_resilience.models.retry_models import CircuitBreakerConfig, RetryConfig


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, milliseconds: float) -> None:
        self.now += milliseconds / 1000


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.RETRY_MAX_ATTEMPTS = 5
    """
    return Settings(
        # === Application ===
        APP_NAME="LLM Resilience Layer (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Retry ===
        RETRY_MAX_ATTEMPTS=4,
        RETRY_INITIAL_DELAY_MS=10,
        RETRY_MAX_DELAY_MS=100,
        RETRY_BACKOFF_FACTOR=3.0,
        RETRY_JITTER=False,

        # === Circuit Breaker ===
        CIRCUIT_BREAKER_ENABLED=True,
        CIRCUIT_BREAKER_FAILURE_THRESHOLD=2,
        CIRCUIT_BREAKER_RESET_TIMEOUT_MS=250,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    """Deterministic clock for circuit breaker timing tests."""
    return FakeClock()


@pytest.fixture
def fast_retry_config() -> RetryConfig:
    """Retry config with zero delays and no jitter."""
    return RetryConfig(
        max_attempts=3,
        initial_delay=0,
        backoff_factor=2,
        jitter=False,
        circuit_breaker=CircuitBreakerConfig(failure_threshold=5, reset_timeout=1000),
    )
