"""Monitoring and metrics instrumentation for the LLM Resilience Layer.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from llm_resilience.monitoring.metrics import (
    circuit_breaker_transitions_total,
    retry_attempts_total,
    retry_outcomes_total,
)

__all__ = [
    "circuit_breaker_transitions_total",
    "retry_attempts_total",
    "retry_outcomes_total",
]
