"""
Unit tests for the exponential backoff calculator.
"""

import random

import pytest

from llm_resilience.models.retry_models import DEFAULT_RETRY_CONFIG, RetryConfig
from llm_resilience.retry.backoff import MAX_UNBOUNDED_DELAY_MS, calculate_backoff


def test_backoff_without_jitter_doubles_each_attempt():
    """Test delays grow by backoff_factor per attempt."""
    config = RetryConfig(max_attempts=5, initial_delay=1000, backoff_factor=2, jitter=False)

    assert calculate_backoff(1, config) == 1000
    assert calculate_backoff(2, config) == 2000
    assert calculate_backoff(3, config) == 4000
    assert calculate_backoff(4, config) == 8000


def test_backoff_respects_max_delay():
    """Test delays are capped at max_delay."""
    config = RetryConfig(
        max_attempts=10, initial_delay=1000, backoff_factor=2, max_delay=5000, jitter=False
    )

    assert calculate_backoff(3, config) == 4000
    assert calculate_backoff(4, config) == 5000
    assert calculate_backoff(5, config) == 5000
    assert calculate_backoff(10, config) == 5000


def test_backoff_without_ceiling_keeps_growing():
    """Test max_delay=None disables the cap."""
    config = RetryConfig(initial_delay=1000, backoff_factor=2, max_delay=None, jitter=False)

    assert calculate_backoff(7, config) == 64000


def test_backoff_fractional_factor_is_rounded():
    """Test non-integer results are rounded to whole milliseconds."""
    config = RetryConfig(initial_delay=1000, backoff_factor=1.5, jitter=False)

    assert calculate_backoff(2, config) == 1500
    assert calculate_backoff(3, config) == 2250


def test_backoff_jitter_stays_within_25_percent():
    """Test jittered delays fall within +/-25% and vary."""
    config = RetryConfig(max_attempts=3, initial_delay=1000, backoff_factor=2, jitter=True)

    delays = [calculate_backoff(2, config) for _ in range(200)]

    assert all(1500 <= delay <= 2500 for delay in delays)
    assert len(set(delays)) > 1


def test_backoff_jitter_is_reproducible_with_seeded_rng():
    """Test an injected Random makes jitter deterministic."""
    config = RetryConfig(initial_delay=1000, backoff_factor=2, jitter=True)

    first = [calculate_backoff(n, config, random.Random(7)) for n in range(1, 5)]
    second = [calculate_backoff(n, config, random.Random(7)) for n in range(1, 5)]

    assert first == second


def test_backoff_uses_default_config_when_none_provided():
    """Test default config (1000ms initial, jitter on) is applied."""
    assert DEFAULT_RETRY_CONFIG.jitter is True

    for _ in range(50):
        delay = calculate_backoff(1)
        assert 750 <= delay <= 1250


def test_backoff_saturates_at_max_delay_for_huge_attempts():
    """Test the exponent overflowing a float still yields the ceiling."""
    config = RetryConfig(max_delay=30000, jitter=False)

    assert calculate_backoff(1100, config) == 30000
    assert calculate_backoff(10_000, RetryConfig(max_delay=30000, jitter=True)) <= 37500


def test_backoff_saturates_without_ceiling():
    config = RetryConfig(initial_delay=1000, backoff_factor=2, max_delay=None, jitter=False)

    assert calculate_backoff(1100, config) == MAX_UNBOUNDED_DELAY_MS


def test_backoff_zero_initial_delay_never_overflows():
    config = RetryConfig(initial_delay=0, backoff_factor=100.0, max_delay=None, jitter=False)

    assert calculate_backoff(500, config) == 0


@pytest.mark.parametrize("initial_delay", [0, 1, 100])
def test_backoff_never_negative(initial_delay):
    """Test delays are never negative, jitter included."""
    config = RetryConfig(initial_delay=initial_delay, backoff_factor=2, jitter=True)

    for attempt in range(1, 11):
        assert calculate_backoff(attempt, config) >= 0


def test_backoff_rejects_attempt_zero():
    """Test attempt numbers are 1-based."""
    with pytest.raises(ValueError):
        calculate_backoff(0, RetryConfig(jitter=False))
