"""
Exponential backoff calculation.

delay = initial_delay * backoff_factor ** (attempt - 1), capped at max_delay,
then scaled by a random factor in [0.75, 1.25] when jitter is enabled.

Large attempt numbers saturate instead of overflowing: the delay becomes
max_delay, or MAX_UNBOUNDED_DELAY_MS when no ceiling is configured.
"""

import math
import random
import sys
from typing import Optional

from llm_resilience.models.retry_models import DEFAULT_RETRY_CONFIG, RetryConfig

JITTER_RATIO = 0.25

# Saturation value for an uncapped delay that no longer fits a float
MAX_UNBOUNDED_DELAY_MS = sys.maxsize


def _exponential_delay(attempt: int, config: RetryConfig) -> float:
    if config.initial_delay == 0:
        return 0.0
    try:
        return config.initial_delay * config.backoff_factor ** (attempt - 1)
    except OverflowError:
        return math.inf


def calculate_backoff(
    attempt: int,
    config: Optional[RetryConfig] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Calculate the delay before retrying after ``attempt`` failed.

    Args:
        attempt: 1-based number of the attempt that just failed
        config: Retry configuration (DEFAULT_RETRY_CONFIG when None)
        rng: Random source for jitter (module ``random`` when None)

    Returns:
        Delay in milliseconds, never negative
    """
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")

    config = config or DEFAULT_RETRY_CONFIG

    delay = _exponential_delay(attempt, config)
    if config.max_delay is not None:
        delay = min(delay, config.max_delay)
    if not math.isfinite(delay):
        delay = MAX_UNBOUNDED_DELAY_MS

    if config.jitter:
        uniform = rng.uniform if rng is not None else random.uniform
        delay *= uniform(1 - JITTER_RATIO, 1 + JITTER_RATIO)

    return round(max(0.0, delay))
