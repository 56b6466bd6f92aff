"""
Circuit breaker for a failing downstream dependency.

State machine:
    CLOSED --(failure_count >= failure_threshold)--> OPEN
    OPEN --(reset_timeout elapsed, checked by can_execute)--> HALF_OPEN
    HALF_OPEN --(failure)--> OPEN
    any --(success)--> CLOSED

Once OPEN, calls fail fast without consuming attempts or waiting on backoff.
HALF_OPEN lets a trial call through to test recovery.

A single instance may be shared by concurrent callers: every state change
happens under an internal lock.
"""

import threading
import time
from typing import Callable, Optional

import structlog

from llm_resilience.models.enums import CircuitBreakerState
from llm_resilience.models.retry_models import (
    DEFAULT_CIRCUIT_BREAKER_CONFIG,
    CircuitBreakerConfig,
)
from llm_resilience.monitoring.metrics import circuit_breaker_transitions_total

logger = structlog.get_logger(__name__)


class CircuitBreaker:
    """
    Consecutive-failure circuit breaker.

    Attributes:
        config: Breaker configuration
        name: Label used in logs (e.g. the provider name)
        metrics_enabled: Count transitions in Prometheus
    """

    def __init__(
        self,
        config: Optional[CircuitBreakerConfig] = None,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
        metrics_enabled: bool = True,
    ):
        """
        Initialize circuit breaker.

        Args:
            config: Breaker configuration (DEFAULT_CIRCUIT_BREAKER_CONFIG when None)
            name: Label used in logs
            clock: Monotonic clock in seconds (injectable for tests)
            metrics_enabled: Record transitions in circuit_breaker_transitions_total
        """
        self.config = config or DEFAULT_CIRCUIT_BREAKER_CONFIG
        self.name = name
        self.metrics_enabled = metrics_enabled
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CircuitBreakerState.CLOSED
        self._failure_count = 0
        self._last_failure_at: Optional[float] = None

    @property
    def state(self) -> CircuitBreakerState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def last_failure_at(self) -> Optional[float]:
        """Clock reading of the most recent recorded failure."""
        return self._last_failure_at

    def get_state(self) -> CircuitBreakerState:
        """Current state."""
        return self._state

    def get_failure_count(self) -> int:
        """Failures recorded since the last success or reset."""
        return self._failure_count

    def can_execute(self) -> bool:
        """
        Check whether a call may go through.

        In OPEN, moves to HALF_OPEN once ``reset_timeout`` has elapsed since
        the last failure. The transition happens here, not on a timer.
        """
        if not self.config.enabled:
            return True

        with self._lock:
            if self._state is not CircuitBreakerState.OPEN:
                return True

            elapsed_ms = (self._clock() - (self._last_failure_at or 0.0)) * 1000
            if elapsed_ms >= self.config.reset_timeout:
                self._transition(CircuitBreakerState.HALF_OPEN)
                return True
            return False

    def record_success(self) -> None:
        """Reset the failure count and close the circuit from any state."""
        with self._lock:
            self._failure_count = 0
            if self._state is not CircuitBreakerState.CLOSED:
                self._transition(CircuitBreakerState.CLOSED)

    def record_failure(self) -> None:
        """
        Count a failure and trip the circuit when warranted.

        A disabled breaker still counts but never changes state.
        """
        with self._lock:
            self._failure_count += 1
            self._last_failure_at = self._clock()

            if not self.config.enabled:
                return

            if self._state is CircuitBreakerState.HALF_OPEN:
                # Trial call failed, recovery has not happened
                self._transition(CircuitBreakerState.OPEN)
            elif (
                self._state is CircuitBreakerState.CLOSED
                and self._failure_count >= self.config.failure_threshold
            ):
                self._transition(CircuitBreakerState.OPEN)

    def reset(self) -> None:
        """Force CLOSED with a zero failure count, regardless of ``enabled``."""
        with self._lock:
            self._failure_count = 0
            self._last_failure_at = None
            if self._state is not CircuitBreakerState.CLOSED:
                self._transition(CircuitBreakerState.CLOSED)

    def _transition(self, new_state: CircuitBreakerState) -> None:
        # Caller holds the lock
        old_state = self._state
        self._state = new_state

        if self.metrics_enabled:
            circuit_breaker_transitions_total.labels(
                from_state=old_state.value, to_state=new_state.value
            ).inc()

        log = logger.warning if new_state is CircuitBreakerState.OPEN else logger.info
        log(
            "Circuit breaker state changed",
            breaker=self.name,
            from_state=old_state.value,
            to_state=new_state.value,
            failure_count=self._failure_count,
            failure_threshold=self.config.failure_threshold,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"name={self.name}, "
            f"state={self._state.value}, "
            f"failures={self._failure_count})"
        )
