"""
Retry engine with circuit breaker support.

This module implements the RetryEngine that runs a caller-supplied async
attempt in a bounded loop. It composes the error classifier, the backoff
calculator and (optionally) a circuit breaker.

Loop, for attempt = 1..max_attempts:
    1. Stop with RetryCancelled if the cancel signal is set
    2. Stop with CircuitOpenError if the breaker refuses the call
    3. Run the attempt; on success record it and return the result
    4. Non-retryable failure: record it, raise NonRetryableError
    5. Retryable failure on the last attempt: record it, raise RetryExhausted
    6. Otherwise record it, notify on_error, wait, and go again

Usage:
    engine = RetryEngine(config, circuit_breaker)
    result = await engine.run(lambda: client.generate(request))
"""

import asyncio
import inspect
import random
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

from llm_resilience.models.enums import TerminalReason
from llm_resilience.models.retry_models import DEFAULT_RETRY_CONFIG, RetryConfig, RetryDecision
from llm_resilience.retry.backoff import calculate_backoff
from llm_resilience.retry.circuit_breaker import CircuitBreaker
from llm_resilience.retry.classifier import classify_error
from llm_resilience.retry.exceptions import (
    CircuitOpenError,
    NonRetryableError,
    RetryCancelled,
    RetryExhausted,
)
from llm_resilience.retry.metadata import RetryMetadata

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
SleepFunc = Callable[[float], Awaitable[Any]]

logger = structlog.get_logger(__name__)


def _accepts_attempt(hook: Callable[..., Any]) -> bool:
    """Whether ``hook`` can be called as ``hook(error, attempt)``."""
    try:
        parameters = inspect.signature(hook).parameters.values()
    except (TypeError, ValueError):
        # No introspectable signature (some builtins), assume the full form
        return True

    positional = 0
    for parameter in parameters:
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 2


class RetryEngine:
    """
    Bounded-attempt retry loop.

    The engine holds no per-call state, so one instance can serve concurrent
    calls. A shared circuit breaker serializes its own updates.

    Attributes:
        config: Effective retry configuration (never mutated)
        circuit_breaker: Optional breaker gating every attempt
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        sleep: SleepFunc = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize retry engine.

        Args:
            config: Retry configuration (DEFAULT_RETRY_CONFIG when None)
            circuit_breaker: Breaker consulted before each attempt
            sleep: Coroutine function taking seconds (injectable for tests)
            rng: Random source for backoff jitter
        """
        self.config = config or DEFAULT_RETRY_CONFIG
        self.circuit_breaker = circuit_breaker
        self._sleep = sleep
        self._rng = rng
        self._hook_takes_attempt = (
            self.config.on_error is not None and _accepts_attempt(self.config.on_error)
        )

    async def run(
        self,
        operation: Operation,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> T:
        """
        Run ``operation`` until it succeeds or a terminal failure occurs.

        Args:
            operation: Zero-argument coroutine function performing one attempt
            cancel_event: Optional signal; when set, the loop stops with
                RetryCancelled at the next check or during a backoff wait

        Returns:
            The operation's result

        Raises:
            NonRetryableError: Failure classified as terminal
            RetryExhausted: Attempt budget used up by retryable failures
            CircuitOpenError: Breaker refused the call
            RetryCancelled: Cancel signal fired
        """
        start_time = time.monotonic()
        breaker = self.circuit_breaker
        attempts_made = 0
        last_error: Optional[BaseException] = None
        last_decision: Optional[RetryDecision] = None

        def summary(terminal_reason: TerminalReason, reason: str) -> RetryMetadata:
            return RetryMetadata(
                attempts=attempts_made,
                terminal_reason=terminal_reason,
                error_type=last_decision.error_type if last_decision else None,
                reason=reason,
                total_latency_ms=int((time.monotonic() - start_time) * 1000),
            )

        for attempt in range(1, self.config.max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise RetryCancelled(
                    summary(TerminalReason.CANCELLED, "Cancelled before attempt"),
                    last_error,
                )

            if breaker is not None and not breaker.can_execute():
                raise CircuitOpenError(
                    summary(TerminalReason.CIRCUIT_OPEN, "Circuit breaker is open"),
                    last_error,
                )

            attempts_made = attempt
            try:
                result = await operation()
            except Exception as error:
                decision = classify_error(error, attempt)
                last_error, last_decision = error, decision

                if breaker is not None:
                    breaker.record_failure()

                if not decision.should_retry:
                    raise NonRetryableError(
                        summary(TerminalReason.NON_RETRYABLE, decision.reason), error
                    ) from error

                if attempt == self.config.max_attempts:
                    raise RetryExhausted(
                        summary(TerminalReason.ATTEMPTS_EXHAUSTED, decision.reason), error
                    ) from error

                await self._notify(error, attempt)

                if decision.custom_delay is not None:
                    delay_ms = decision.custom_delay
                else:
                    delay_ms = calculate_backoff(attempt, self.config, self._rng)

                if cancel_event is not None and cancel_event.is_set():
                    raise RetryCancelled(
                        summary(TerminalReason.CANCELLED, "Cancelled before backoff"), error
                    ) from error

                if await self._wait(delay_ms, cancel_event):
                    raise RetryCancelled(
                        summary(TerminalReason.CANCELLED, "Cancelled during backoff"), error
                    ) from error
                continue

            if breaker is not None:
                breaker.record_success()
            return result

        # Unreachable: the last iteration either returns or raises
        raise AssertionError("retry loop exited without an outcome")

    async def _notify(self, error: Exception, attempt: int) -> None:
        """Call the on_error hook; a failing hook never stops the loop."""
        hook = self.config.on_error
        if hook is None:
            return
        try:
            if self._hook_takes_attempt:
                outcome = hook(error, attempt)
            else:
                outcome = hook(error)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as hook_error:
            logger.warning(
                "on_error hook failed",
                attempt=attempt,
                hook_error=str(hook_error),
                hook_error_type=type(hook_error).__name__,
            )

    async def _wait(self, delay_ms: int, cancel_event: Optional[asyncio.Event]) -> bool:
        """Sleep for ``delay_ms``; return True if cancelled while waiting."""
        delay_seconds = delay_ms / 1000
        if cancel_event is None:
            await self._sleep(delay_seconds)
            return False

        sleeper = asyncio.ensure_future(self._sleep(delay_seconds))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, waiter):
                if not task.done():
                    task.cancel()
        return cancel_event.is_set()


async def run_with_retry(
    operation: Operation,
    config: Optional[RetryConfig] = None,
    circuit_breaker: Optional[CircuitBreaker] = None,
    *,
    cancel_event: Optional[asyncio.Event] = None,
) -> T:
    """Run ``operation`` once through a RetryEngine built from the arguments."""
    engine = RetryEngine(config, circuit_breaker)
    return await engine.run(operation, cancel_event=cancel_event)
