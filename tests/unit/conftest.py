"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from llm_resilience.llm.base_client import BaseLLMClient
from llm_resilience.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


@pytest.fixture
def recorded_sleep():
    """Async sleep replacement that records requested delays (seconds)."""
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep


@pytest.fixture
def make_operation():
    """Factory fixture for an attempt that raises the given outcomes in order.

    Usage:
        def test_something(make_operation):
            op = make_operation(Exception("503 Service Unavailable"), "ok")
            # first call raises, second returns "ok"
    """
    def _create(*outcomes):
        return AsyncMock(side_effect=list(outcomes))

    return _create


@pytest.fixture
def generation_request() -> LLMGenerationRequest:
    """Minimal structured-generation request."""
    return LLMGenerationRequest(
        prompt="Extract the invoice fields",
        content="Invoice #42, total 100 EUR",
        model="test-model",
        temperature=0.1,
        max_tokens=512,
        format_schema={"type": "object", "properties": {"total": {"type": "number"}}},
    )


@pytest.fixture
def generation_response() -> LLMGenerationResponse:
    """Successful structured-generation response."""
    return LLMGenerationResponse(
        content='{"total": 100}',
        data={"total": 100},
        model_version="test-model-2026-01",
        finish_reason="stop",
        prompt_tokens=120,
        completion_tokens=8,
        latency_ms=350,
    )


@pytest.fixture
def mock_llm_client(generation_response):
    """Mock provider adapter whose generate() succeeds."""
    mock = AsyncMock(spec=BaseLLMClient)
    mock.provider = "mock"
    mock.generate = AsyncMock(return_value=generation_response)
    mock.health_check = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def on_error_hook():
    """Synchronous on_error hook recording (error, attempt) calls."""
    return Mock(return_value=None)
