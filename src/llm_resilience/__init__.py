"""
LLM Resilience Layer for structured-generation clients.

Wraps calls to a remote structured-generation endpoint with:
- Error classification (retryable vs terminal failures)
- Exponential backoff with jitter
- Circuit breaker (CLOSED / OPEN / HALF_OPEN)
- Bounded-attempt retry orchestration

Architecture: pure decision functions + in-memory breaker state + async retry loop
"""

__version__ = "0.1.0"
