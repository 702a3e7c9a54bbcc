"""Client-side request pacing.

A tree fetch fans out to many concurrent page requests.  Every request on
one transport draws from a single :class:`AsyncTokenBucket`, so the
aggregate rate stays under ``rate_limit_rps`` however wide the fan-out.

The bucket may go into debt: a caller that finds it empty takes its token
anyway and sleeps until the debt would have been repaid.  Later callers
see the larger debt and queue up behind it, which keeps pacing fair
without holding a lock across the sleep.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable


class AsyncTokenBucket:
    """Token bucket refilled at *rate_rps*, holding at most *burst* tokens.

    Parameters
    ----------
    rate_rps:
        Refill rate in tokens per second.
    burst:
        Bucket capacity; this many requests go out back to back.
    clock:
        Monotonic time source in seconds.
    """

    def __init__(
        self,
        rate_rps: float,
        burst: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if rate_rps <= 0:
            raise ValueError(f"rate_rps must be > 0, got {rate_rps}")
        if burst < 1:
            raise ValueError(f"burst must be >= 1, got {burst}")
        self.rate = rate_rps
        self.burst = burst
        self._clock = clock
        self._balance = float(burst)
        self._updated = clock()

    @property
    def balance(self) -> float:
        """Tokens at the last update; negative while callers are queued."""
        return self._balance

    def reserve(self, tokens: int = 1) -> float:
        """Take *tokens* now and return how long the caller must wait.

        Contains no ``await``, so concurrent coroutines reserve one at a
        time.
        """
        now = self._clock()
        self._balance = min(self.burst, self._balance + (now - self._updated) * self.rate)
        self._updated = now
        self._balance -= tokens
        if self._balance >= 0:
            return 0.0
        return -self._balance / self.rate

    async def acquire(self, tokens: int = 1) -> float:
        """Reserve *tokens* and sleep out the wait.  Returns the wait."""
        wait = self.reserve(tokens)
        if wait > 0:
            await asyncio.sleep(wait)
        return wait
