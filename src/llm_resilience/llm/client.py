"""
Resilient structured-generation client.

Binds a retry configuration and a circuit breaker to a provider client. The
breaker is created once per ResilientLLMClient, so every call made through
the same instance shares it; pass an existing breaker (``breaker=`` in
create_client) to share one breaker across several clients.

Usage:
    client = create_client(
        retry_config={"max_attempts": 5, "jitter": False},
        circuit_breaker={"failure_threshold": 3},
        llm_client=ClaudeAdapter(...),
    )
    response = await client.generate_with_retry(request)
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

from llm_resilience.config import Settings, settings as default_settings
from llm_resilience.llm.base_client import BaseLLMClient
from llm_resilience.llm.errors import to_llm_error
from llm_resilience.llm.exceptions import LLMClientError
from llm_resilience.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from llm_resilience.models.retry_models import (
    ConfigOverrides,
    RetryConfig,
    merge_retry_config,
)
from llm_resilience.monitoring.metrics import retry_attempts_total, retry_outcomes_total
from llm_resilience.retry.circuit_breaker import CircuitBreaker
from llm_resilience.retry.classifier import classify_description, describe_error
from llm_resilience.retry.engine import RetryEngine
from llm_resilience.retry.exceptions import RetryError

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class ResilientLLMClient:
    """
    Structured-generation client with retry and circuit breaking.

    Attributes:
        retry_config: Effective config (defaults merged with overrides)
        circuit_breaker: Breaker gating every call, or None when disabled
        llm_client: Provider adapter used by ``generate_with_retry``
    """

    def __init__(
        self,
        retry_config: ConfigOverrides = None,
        circuit_breaker_config: ConfigOverrides = None,
        *,
        llm_client: Optional[BaseLLMClient] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        metrics_enabled: bool = True,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the client.

        Args:
            retry_config: Partial RetryConfig (model or mapping) merged over defaults
            circuit_breaker_config: Partial breaker config, wins over
                ``retry_config.circuit_breaker``
            llm_client: Provider adapter for ``generate_with_retry``
            circuit_breaker: Existing breaker to share (its own config and
                metrics setting are kept)
            metrics_enabled: Record Prometheus metrics
            sleep: Backoff sleep (injectable for tests)
        """
        config = merge_retry_config(retry_config)
        if circuit_breaker_config is not None:
            config = merge_retry_config({"circuit_breaker": circuit_breaker_config}, config)

        self.retry_config: RetryConfig = config
        self.llm_client = llm_client
        self.metrics_enabled = metrics_enabled

        provider = llm_client.provider if llm_client is not None else "default"
        if circuit_breaker is None and config.circuit_breaker is not None:
            circuit_breaker = CircuitBreaker(
                config.circuit_breaker, name=provider, metrics_enabled=metrics_enabled
            )
        self.circuit_breaker = circuit_breaker

        self._engine = RetryEngine(config, circuit_breaker, sleep=sleep)

        logger.info(
            "Resilient LLM client initialized",
            provider=provider,
            max_attempts=config.max_attempts,
            initial_delay_ms=config.initial_delay,
            max_delay_ms=config.max_delay,
            backoff_factor=config.backoff_factor,
            jitter=config.jitter,
            circuit_breaker_enabled=bool(circuit_breaker and circuit_breaker.config.enabled),
        )

    @classmethod
    def from_settings(
        cls, settings: Optional[Settings] = None, **kwargs: Any
    ) -> "ResilientLLMClient":
        """Build a client from environment-driven settings (module ``settings`` when None)."""
        settings = settings or default_settings
        kwargs.setdefault("metrics_enabled", settings.PROMETHEUS_ENABLED)
        return cls(RetryConfig.from_settings(settings), **kwargs)

    async def run_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> T:
        """
        Run one attempt-callable under the retry policy.

        Args:
            operation: Zero-argument coroutine function performing one attempt
            cancel_event: Optional signal aborting the loop with RetryCancelled

        Returns:
            The operation's result

        Raises:
            RetryError: Terminal failure (NonRetryableError, RetryExhausted,
                CircuitOpenError or RetryCancelled)
        """
        start_time = time.monotonic()
        attempts = 0

        async def attempt() -> T:
            nonlocal attempts
            attempts += 1
            try:
                return await operation()
            except Exception as error:
                if self.metrics_enabled:
                    error_type = classify_description(describe_error(error))
                    retry_attempts_total.labels(error_type=error_type.value).inc()
                raise

        try:
            result = await self._engine.run(attempt, cancel_event=cancel_event)
        except RetryError as e:
            if self.metrics_enabled:
                retry_outcomes_total.labels(outcome=e.terminal_reason.value).inc()
            logger.error(
                "Retry sequence failed",
                terminal_reason=e.terminal_reason.value,
                error_type=e.error_type.value if e.error_type else None,
                reason=e.reason,
                attempts=e.attempts,
                total_latency_ms=e.metadata.total_latency_ms,
                last_error=str(e.last_error) if e.last_error else None,
            )
            raise

        if self.metrics_enabled:
            retry_outcomes_total.labels(outcome="success").inc()
        log = logger.info if attempts > 1 else logger.debug
        log(
            "Retry sequence succeeded",
            attempts=attempts,
            total_latency_ms=int((time.monotonic() - start_time) * 1000),
        )
        return result

    async def generate_with_retry(
        self,
        request: LLMGenerationRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> LLMGenerationResponse:
        """
        Generate structured output through the configured provider client.

        Provider errors are normalized with ``to_llm_error`` before
        classification.

        Raises:
            ValueError: No llm_client configured
            RetryError: Terminal failure
        """
        if self.llm_client is None:
            raise ValueError("generate_with_retry requires an llm_client")

        llm_client = self.llm_client

        async def attempt() -> LLMGenerationResponse:
            try:
                return await llm_client.generate(request)
            except LLMClientError:
                raise
            except Exception as error:
                raise to_llm_error(error) from error

        return await self.run_with_retry(attempt, cancel_event=cancel_event)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"max_attempts={self.retry_config.max_attempts}, "
            f"circuit_breaker={self.circuit_breaker!r})"
        )


def create_client(
    retry_config: ConfigOverrides = None,
    circuit_breaker: ConfigOverrides = None,
    *,
    llm_client: Optional[BaseLLMClient] = None,
    breaker: Optional[CircuitBreaker] = None,
    **kwargs: Any,
) -> ResilientLLMClient:
    """
    Create a ResilientLLMClient from partial configs.

    Args:
        retry_config: Partial retry config merged over DEFAULT_RETRY_CONFIG
        circuit_breaker: Partial circuit breaker config
        llm_client: Provider adapter for ``generate_with_retry``
        breaker: Existing breaker to share instead of creating one
        **kwargs: Passed through to ResilientLLMClient (metrics_enabled, sleep)
    """
    return ResilientLLMClient(
        retry_config,
        circuit_breaker,
        llm_client=llm_client,
        circuit_breaker=breaker,
        **kwargs,
    )
