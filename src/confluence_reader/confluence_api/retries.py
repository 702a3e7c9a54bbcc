"""When to retry a Confluence request, and how long to wait first.

:class:`RetryPolicy` is built once per transport from the client
configuration.  It is a pure value object: the transport asks it whether
a response or exception is worth another attempt and how long to sleep,
and does the sleeping itself.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from confluence_reader.config import ConfluenceReaderConfig

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and exponential backoff schedule.

    Attributes
    ----------
    max_attempts:
        Total attempts per request, the first one included.
    base_delay:
        Delay before the second attempt; doubles on every further attempt.
    max_delay:
        Cap on any single delay, ``Retry-After`` included.
    jitter:
        Scale each delay to a random 50-100 % of its value.
    """

    max_attempts: int = 5
    base_delay: float = 1.0
    max_delay: float = 60.0
    jitter: bool = True
    rand: Callable[[], float] = field(default=random.random, repr=False, compare=False)

    @classmethod
    def from_config(cls, config: ConfluenceReaderConfig) -> RetryPolicy:
        return cls(
            max_attempts=config.retry_max_attempts,
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
            jitter=config.retry_jitter,
        )

    def is_retryable(
        self,
        status_code: int | None = None,
        exception: BaseException | None = None,
    ) -> bool:
        """Whether the failure itself is transient, ignoring the budget."""
        if exception is not None:
            return isinstance(exception, RETRYABLE_EXCEPTIONS)
        return status_code in RETRYABLE_STATUSES

    def has_attempts_left(self, attempt: int) -> bool:
        """``True`` if another attempt may follow 0-based *attempt*."""
        return attempt + 1 < self.max_attempts

    def delay(self, attempt: int, retry_after: float | None = None) -> float:
        """Seconds to wait after the failed 0-based *attempt*.

        A server-sent ``Retry-After`` replaces the exponential schedule but
        is still capped and jittered.
        """
        if retry_after is not None:
            wait = min(max(retry_after, 0.0), self.max_delay)
        else:
            wait = min(self.base_delay * 2 ** attempt, self.max_delay)
        if self.jitter:
            wait *= 0.5 + self.rand() * 0.5
        return wait
