"""Custom Prometheus metrics for the LLM Resilience Layer.

These metrics are registered on the default prometheus_client registry and
can be exposed by the host application at its /metrics endpoint.
Alert rules should be configured for:
- circuit_breaker_transitions_total (any transition to OPEN)
- retry_outcomes_total (high exhausted / circuit_open rate)
"""

from prometheus_client import Counter

# === Retry Metrics ===

retry_attempts_total = Counter(
    "llm_retry_attempts_total",
    "Failed attempts by classified error type",
    ["error_type"],
)
"""
Failed attempt counter by classified error type.

Labels:
- error_type: validation, rate_limit, server_error, network_error, client_error, unknown

Alert thresholds:
- WARN: rate_limit share > 10% of attempts
"""

retry_outcomes_total = Counter(
    "llm_retry_outcomes_total",
    "Final outcome of retry sequences",
    ["outcome"],
)
"""
Final outcome counter (one increment per top-level call).

Labels:
- outcome: success, non_retryable, attempts_exhausted, circuit_open, cancelled

Alert thresholds:
- WARN: attempts_exhausted rate > 5% of calls
- CRITICAL: circuit_open rate > 1% of calls
"""

# === Circuit Breaker Metrics ===

circuit_breaker_transitions_total = Counter(
    "llm_circuit_breaker_transitions_total",
    "Circuit breaker state transitions",
    ["from_state", "to_state"],
)
"""
Circuit breaker transition counter.

Labels:
- from_state / to_state: closed, open, half_open

Alert thresholds:
- WARN: any closed -> open transition
"""
