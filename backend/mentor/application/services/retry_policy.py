"""Retry/backoff policy for calls to external providers.

Exponential backoff: the delay before retry ``i`` (0-indexed) is
``base_delay * multiplier ** i``. With the defaults (5 attempts, base 1s,
multiplier 2) a failing call is retried after 1s, 2s, 4s and 8s, and the
fifth failure is terminal.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from mentor.domain.exceptions import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential-backoff retry for async operations.

    Usage:
        policy = RetryPolicy(max_attempts=5)
        vector = await policy.run(lambda: provider.embed(text), description="Embedding API call")
    """

    max_attempts: int = 5
    base_delay: float = 1.0
    multiplier: float = 2.0
    retry_on: tuple[type[Exception], ...] = (Exception,)
    sleep: SleepFunc = field(default=asyncio.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")

    def delay_for(self, retry_index: int) -> float:
        """Seconds to wait before retry ``retry_index`` (0 = first retry)."""
        return self.base_delay * self.multiplier ** retry_index

    @property
    def max_total_delay(self) -> float:
        """Accumulated backoff when every attempt fails."""
        return sum(self.delay_for(i) for i in range(self.max_attempts - 1))

    def _retrying(self, description: str) -> AsyncRetrying:
        def log_failure(retry_state: RetryCallState) -> None:
            logger.error(
                "%s failed (attempt %d/%d): %s",
                description,
                retry_state.attempt_number,
                self.max_attempts,
                retry_state.outcome.exception(),
            )

        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=self.multiplier),
            retry=retry_if_exception_type(self.retry_on),
            after=log_failure,
            sleep=self.sleep,
        )

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        description: str = "Operation",
    ) -> T:
        """Run ``operation`` until it succeeds or the attempt budget is spent.

        Exceptions outside ``retry_on`` propagate immediately.

        Raises:
            RetryExhaustedError: After ``max_attempts`` failures, carrying the
                last underlying error.
        """
        try:
            return await self._retrying(description)(operation)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            raise RetryExhaustedError(description, self.max_attempts, last_error) from last_error
