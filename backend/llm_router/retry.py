"""
Retry orchestrator with automatic key rotation.

FLOW:
=====
1. Budget = min(pool size, max_attempts); 1 when the pool is empty
   (single attempt without a key).
2. Each attempt takes the next key from the pool and awaits the
   caller's operation with it.
3. Success returns immediately. A RATE_LIMITED failure waits a jittered
   backoff and moves on to the next key. Any other failure is re-raised
   at once.
4. When the budget runs out the last failure is re-raised unchanged.

The orchestrator never wraps exceptions: callers always see the object
raised by their own operation.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar

from configs import (
    MAX_KEY_ATTEMPTS,
    BACKOFF_BASE_SECONDS,
    BACKOFF_JITTER_SECONDS,
    ATTEMPT_TIMEOUT_SECONDS,
)

from .errors import FailureKind, failure_kind_of
from .key_pool import KeyPool

logger = logging.getLogger("eduvision.retry")

T = TypeVar("T")

Operation = Callable[[Optional[str]], Awaitable[T]]
SleepFn = Callable[[float], Awaitable[None]]


class RetryOrchestrator:
    """Runs one logical Gemini call across up to ``max_attempts`` keys."""

    def __init__(
        self,
        pool: KeyPool,
        max_attempts: int = MAX_KEY_ATTEMPTS,
        sleep: SleepFn = asyncio.sleep,
        jitter: Callable[[], float] = random.random,
        backoff_base: float = BACKOFF_BASE_SECONDS,
        backoff_jitter: float = BACKOFF_JITTER_SECONDS,
        attempt_timeout: Optional[float] = ATTEMPT_TIMEOUT_SECONDS or None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.pool = pool
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._jitter = jitter
        self.backoff_base = backoff_base
        self.backoff_jitter = backoff_jitter
        self.attempt_timeout = attempt_timeout

    def retry_budget(self) -> int:
        """Attempts allowed for one logical call."""
        size = self.pool.size
        if size == 0:
            return 1
        return min(size, self.max_attempts)

    def backoff_delay(self) -> float:
        """Seconds to wait after a rate-limited attempt."""
        return self.backoff_base + self._jitter() * self.backoff_jitter

    async def _attempt(self, operation: Operation, key: Optional[str]):
        if self.attempt_timeout:
            return await asyncio.wait_for(operation(key), timeout=self.attempt_timeout)
        return await operation(key)

    async def execute_with_retry(self, operation: Operation) -> T:
        """
        Execute ``operation`` with key rotation on rate-limit failures.

        Args:
            operation: Coroutine function taking the key to use (None when
                no keys are configured). It may be invoked several times.

        Returns:
            Whatever the first successful invocation returns.

        Raises:
            The exception of the failing attempt: immediately for non-rate-limit
            failures, or the last rate-limit failure once the budget is spent.
        """
        budget = self.retry_budget()
        last_error: Optional[BaseException] = None

        for attempt in range(1, budget + 1):
            key = self.pool.next_key()
            try:
                return await self._attempt(operation, key)
            except Exception as e:
                if failure_kind_of(e) is not FailureKind.RATE_LIMITED:
                    raise
                last_error = e
                logger.warning(
                    "Rate limit hit, switching to next key (attempt %d/%d)", attempt, budget
                )
                if attempt < budget:
                    await self._sleep(self.backoff_delay())

        logger.error("All %d attempt(s) rate limited", budget)
        raise last_error
