"""
Integration tests for LLM Resilience Layer.

Test components together with real asyncio timing:
- Retry engine + circuit breaker + real sleeps
- Shared circuit breaker across concurrent calls
"""
