"""
Base LLM provider with retry and circuit breaker patterns.

Transport failures (timeouts, refused connections) are retried with
exponential backoff; repeated failures open the circuit for a cooldown so
suggestion requests fail fast while the model server is down.
"""

import time
from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar, cast

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from stockpilot.config import get_logger, get_settings
from stockpilot.config.settings import LLMSettings
from stockpilot.core.exceptions import (
    CircuitBreakerOpenError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from stockpilot.core.interfaces.llm import HealthStatus, ILLMProvider

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class CircuitBreakerState:
    """State for circuit breaker pattern."""

    provider: str = "llm"
    failures: int = 0
    last_failure_time: float = 0.0
    is_open: bool = False
    cooldown_seconds: int = 60
    failure_threshold: int = 3

    def record_failure(self) -> None:
        """Record a failure and open the circuit at the threshold."""
        self.failures += 1
        self.last_failure_time = time.monotonic()

        if self.failures >= self.failure_threshold and not self.is_open:
            self.is_open = True
            logger.warning(
                "circuit_breaker_opened",
                provider=self.provider,
                failures=self.failures,
                cooldown=self.cooldown_seconds,
            )

    def record_success(self) -> None:
        if self.is_open:
            logger.info("circuit_breaker_closed", provider=self.provider)
        self.failures = 0
        self.is_open = False

    def check(self) -> None:
        """
        Check if circuit allows requests.

        Raises CircuitBreakerOpenError while the cooldown is running; once it
        has elapsed one request is let through (half-open).
        """
        if not self.is_open:
            return

        remaining = self.cooldown_remaining
        if remaining > 0:
            raise CircuitBreakerOpenError(self.provider, remaining)

        logger.info("circuit_breaker_half_open", provider=self.provider)

    @property
    def cooldown_remaining(self) -> int:
        """Seconds remaining in cooldown."""
        if not self.is_open:
            return 0
        elapsed = time.monotonic() - self.last_failure_time
        return max(0, int(self.cooldown_seconds - elapsed))


class BaseLLMProvider(ILLMProvider, ABC):
    """
    Base class for LLM providers with resilience patterns.

    Provides:
    - Automatic retries with exponential backoff
    - Circuit breaker for cascading failure prevention
    - Health check caching
    """

    provider_name = "llm"

    def __init__(self, llm_settings: LLMSettings | None = None) -> None:
        self.llm_settings = llm_settings or get_settings().llm
        self.circuit_breaker = CircuitBreakerState(
            provider=self.provider_name,
            failure_threshold=self.llm_settings.failure_threshold,
            cooldown_seconds=self.llm_settings.cooldown_seconds,
        )
        self._health_cache: HealthStatus | None = None
        self._health_cache_time: float = 0.0
        self._health_cache_ttl: float = 30.0

    def _retrying(self) -> AsyncRetrying:
        cfg = self.llm_settings
        return AsyncRetrying(
            stop=stop_after_attempt(max(1, cfg.max_retries)),
            wait=wait_exponential(
                multiplier=cfg.retry_delay,
                min=cfg.retry_delay,
                max=cfg.retry_delay * (cfg.retry_multiplier**3),
            ),
            retry=retry_if_exception_type((TimeoutError, ConnectionError)),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "llm_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _with_resilience(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute operation with retry and circuit breaker.

        Raises:
            CircuitBreakerOpenError: If circuit is open
            LLMTimeoutError: If every attempt timed out
            LLMUnavailableError: If the provider cannot be reached
        """
        self.circuit_breaker.check()

        try:
            result = await self._retrying()(operation, *args, **kwargs)
        except TimeoutError as e:
            self.circuit_breaker.record_failure()
            raise LLMTimeoutError(self.llm_settings.timeout) from e
        except ConnectionError as e:
            self.circuit_breaker.record_failure()
            raise LLMUnavailableError(self.provider_name, str(e)) from e

        self.circuit_breaker.record_success()
        return cast(T, result)

    def is_available(self) -> bool:
        """
        Synchronous availability check with caching.

        Uses cached health status to avoid blocking calls.
        """
        if self.circuit_breaker.is_open:
            return False

        now = time.monotonic()
        if self._health_cache and (now - self._health_cache_time) < self._health_cache_ttl:
            return self._health_cache.available

        return True  # optimistic until the async check runs

    def _update_health_cache(self, status: HealthStatus) -> None:
        self._health_cache = status
        self._health_cache_time = time.monotonic()
