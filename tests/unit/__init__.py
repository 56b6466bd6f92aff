"""
Unit tests for LLM Resilience Layer.

Test individual components in isolation:
- Config models (defaults, merge semantics)
- Backoff calculator
- Error classifier
- Circuit breaker state machine
- Retry engine (loop, breaker interplay, cancellation)
- Client facade and error normalization
"""
