"""Retry policy for blob store and extraction calls."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from kbsync.domain.exceptions import TransientError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "retry.scheduled",
        operation=getattr(retry_state.fn, "__qualname__", repr(retry_state.fn)),
        attempt=retry_state.attempt_number,
        error=str(exc) if exc else None,
    )


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff for transient failures only.

    Permission errors, missing blobs and malformed documents are raised on
    the first attempt.
    """

    attempts: int = 3
    min_wait: float = 0.5
    max_wait: float = 8.0
    multiplier: float = 0.5

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be >= 1")
        if self.min_wait < 0 or self.max_wait < self.min_wait:
            raise ValueError("require 0 <= min_wait <= max_wait")

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=self.multiplier, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception_type(TransientError),
            before_sleep=_log_retry,
            reraise=True,
        )

    async def call(self, fn: Callable[..., Awaitable[T]], *args: object, **kwargs: object) -> T:
        """Await fn(*args, **kwargs), retrying on TransientError."""
        return await self._retrying()(fn, *args, **kwargs)


NO_RETRY = RetryPolicy(attempts=1, min_wait=0.0, max_wait=0.0)
