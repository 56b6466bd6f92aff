"""Integration test fixtures.

Provides a provider adapter that speaks real HTTP through httpx, backed by
an in-process MockTransport, so the full normalize -> classify -> retry
path runs without network access.
"""

import json
import time

import httpx
import pytest

from llm_resilience.llm.base_client import BaseLLMClient
from llm_resilience.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


class JSONEndpointClient(BaseLLMClient):
    """Minimal structured-generation adapter for a JSON-over-HTTP endpoint.

    Raises raw httpx / json errors; normalization is left to the
    resilience layer.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport):
        super().__init__(provider="json-endpoint", default_model="test-model", timeout=5)
        self._client = httpx.AsyncClient(
            base_url="https://llm.example.com",
            transport=transport,
            timeout=httpx.Timeout(self.timeout),
        )

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        start_time = time.monotonic()
        response = await self._client.post(
            "/v1/generate",
            json={
                "model": request.model or self.default_model,
                "prompt": request.full_prompt(),
                "format": request.format_schema,
            },
        )
        response.raise_for_status()

        body = response.json()
        return LLMGenerationResponse(
            content=body["output"],
            data=json.loads(body["output"]),
            model_version=body["model"],
            finish_reason="stop",
            latency_ms=int((time.monotonic() - start_time) * 1000),
        )

    async def health_check(self) -> bool:
        try:
            response = await self._client.get("/health")
        except httpx.HTTPError:
            return False
        return response.status_code == 200

    async def close(self) -> None:
        await self._client.aclose()
        await super().close()


@pytest.fixture
def scripted_endpoint():
    """Factory fixture for an endpoint replaying scripted responses in order.

    Each script item is an httpx.Response, an exception to raise, or a dict
    rendered as a successful generation body.

    Usage:
        async def test_something(scripted_endpoint):
            llm_client, requests = scripted_endpoint(httpx.Response(503), {"total": 1})
            async with llm_client:
                ...
    """
    def _create(*script):
        remaining = list(script)
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            item = remaining.pop(0)
            if isinstance(item, Exception):
                raise item
            if isinstance(item, dict):
                return httpx.Response(
                    200, json={"model": "test-model-2026-01", "output": json.dumps(item)}
                )
            return item

        client = JSONEndpointClient(httpx.MockTransport(handler))
        return client, requests

    return _create
