"""Bounded retry with exponential backoff for fallible refresh operations."""

from __future__ import annotations

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 10
DEFAULT_BASE_DELAY_MS = 50


def backoff_delays(max_retries: int, base_delay_ms: int = DEFAULT_BASE_DELAY_MS) -> list[int]:
    """Return the delay (ms) waited before each retry, in order."""
    return [base_delay_ms * 2**attempt for attempt in range(max_retries)]


class RetryingRefresher:
    """Run an operation until it succeeds or ``max_retries`` retries are spent.

    The first attempt runs immediately. After the k-th failure (k starting at 0)
    the refresher waits ``base_delay_ms * 2**k`` milliseconds before trying
    again, so a permanently failing operation is invoked ``max_retries + 1``
    times. Only exceptions listed in ``retry_on`` are retried; anything else
    propagates from the attempt that raised it.

    ``attempts`` holds the number of times ``operation`` was invoked by the most
    recent ``refresh`` call, whether it succeeded or not.

    ``sleep`` takes seconds, like :func:`time.sleep`, and can be swapped for a
    fake clock in tests.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
        sleep: Callable[[float], None] = time.sleep,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.sleep = sleep
        self.retry_on = retry_on
        self.attempts = 0

    def delay_for(self, attempt_index: int) -> int:
        return self.base_delay_ms * 2**attempt_index

    def refresh(self, operation: Callable[[], T]) -> T:
        retries = 0
        self.attempts = 0
        while True:
            self.attempts += 1
            try:
                return operation()
            except self.retry_on as exc:
                if retries >= self.max_retries:
                    logger.error(
                        "Refresh failed after %d attempt(s): %s", retries + 1, exc
                    )
                    raise
                delay_ms = self.delay_for(retries)
                logger.warning(
                    "Refresh attempt %d failed, retrying in %d ms: %s",
                    retries + 1,
                    delay_ms,
                    exc,
                )
                self.sleep(delay_ms / 1000.0)
                retries += 1
