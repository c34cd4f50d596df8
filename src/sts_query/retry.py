# STS Query Client
# File: retry.py
# Version: v4

"""Retry policy for Query protocol calls.

Failures are split into two classes:

- RETRYABLE: network errors, throttling codes, HTTP 429 and 5xx.
- TERMINAL: everything else (validation, parse errors, other 4xx).

Retryable failures are retried with exponential backoff
(``base_delay * 2 ** (attempt - 1)``) until ``max_attempts`` calls have
been made. ``max_attempts`` may not go past the point where a delay would
hit ``max_delay``, so each retry waits longer than the previous one. The
policy object holds settings only, so one instance can serve many
concurrent calls and each call still gets its own attempt budget.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, FrozenSet, Optional, TypeVar
import asyncio
import logging

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .config import StsConfig
from .errors import ConfigurationError, ServiceError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

THROTTLING_CODES: FrozenSet[str] = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "ThrottledException",
        "RequestThrottled",
        "RequestThrottledException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "SlowDown",
        "PriorRequestNotComplete",
    }
)


class RetryDecision(str, Enum):
    RETRYABLE = "retryable"
    TERMINAL = "terminal"


def classify(error: BaseException) -> RetryDecision:
    if isinstance(error, TransportError):
        return RetryDecision.RETRYABLE

    if isinstance(error, ServiceError):
        if error.code in THROTTLING_CODES:
            return RetryDecision.RETRYABLE
        status = error.status_code or 0
        if status == 429 or status >= 500:
            return RetryDecision.RETRYABLE

    return RetryDecision.TERMINAL


def max_attempts_for_backoff(base_delay: float, max_delay: float) -> int:
    """Largest attempt budget whose backoff delays all stay within ``max_delay``.

    Delays double from ``base_delay``, so every retry waits strictly longer
    than the one before as long as no delay has to be capped.
    """
    if base_delay <= 0:
        return 1
    attempts = 1
    while base_delay * (2 ** (attempts - 1)) <= max_delay:
        attempts += 1
    return attempts


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 4
    base_delay: float = 0.3
    max_delay: float = 20.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {self.max_attempts}.")
        limit = max_attempts_for_backoff(self.base_delay, self.max_delay)
        if self.max_attempts > limit:
            raise ConfigurationError(
                f"max_attempts={self.max_attempts} needs backoff beyond the "
                f"{self.max_delay:g}s cap (base {self.base_delay:g}s); at most "
                f"{limit} attempt(s) keep delays increasing."
            )

    @classmethod
    def from_config(
        cls,
        config: StsConfig,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> "RetryPolicy":
        """Build a policy, trimming ``max_attempts`` to what the backoff cap allows."""
        base_delay = float(config.backoff_base_seconds)
        max_delay = float(config.backoff_max_seconds)
        max_attempts = max(1, int(config.max_attempts))

        limit = max_attempts_for_backoff(base_delay, max_delay)
        if max_attempts > limit:
            logger.warning(
                "Lowering max_attempts from %d to %d so backoff stays under %gs",
                max_attempts,
                limit,
                max_delay,
            )
            max_attempts = limit

        return cls(
            max_attempts=max_attempts,
            base_delay=base_delay,
            max_delay=max_delay,
            sleep=sleep or asyncio.sleep,
        )

    def classify(self, error: BaseException) -> RetryDecision:
        return classify(error)

    def is_retryable(self, error: BaseException) -> bool:
        return classify(error) is RetryDecision.RETRYABLE

    @staticmethod
    def _log_before_sleep(label: str) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
            logger.warning(
                "Retrying %s after attempt %d in %.2fs: %s",
                label,
                retry_state.attempt_number,
                delay,
                error,
            )

        return before_sleep

    async def run(
        self,
        fn: Callable[[], Awaitable[T]],
        on_attempt: Optional[Callable[[int], None]] = None,
        label: str = "call",
    ) -> T:
        """Call ``fn`` until it succeeds, fails terminally or runs out of attempts.

        The last error is re-raised unchanged. ``on_attempt`` is told the
        attempt number before each call; ``label`` names the call in retry logs.
        """
        retrying = AsyncRetrying(
            sleep=self.sleep,
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_delay, max=self.max_delay),
            retry=retry_if_exception(self.is_retryable),
            before_sleep=self._log_before_sleep(label),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if on_attempt is not None:
                    on_attempt(attempt.retry_state.attempt_number)
                return await fn()
        raise AssertionError("unreachable")  # pragma: no cover
