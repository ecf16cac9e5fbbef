"""
Rate limiting for calls to the extraction service.

The ingestion cycle calls ``wait()`` before every extraction call. Two
strategies are provided:

- FixedDelayRateLimiter: minimum gap (+ optional jitter) between calls
- TokenBucketRateLimiter: sustained rate with a burst allowance
"""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from typing import Callable

Clock = Callable[[], float]
Sleeper = Callable[[float], None]

STRATEGIES = ("none", "fixed", "token_bucket")


class RateLimiter(ABC):
    """Blocks the caller until the next call is allowed."""

    @abstractmethod
    def wait(self) -> None:
        ...


class NoopRateLimiter(RateLimiter):
    """Never blocks."""

    def wait(self) -> None:
        return None


class FixedDelayRateLimiter(RateLimiter):
    """
    Enforce a minimum delay between consecutive calls.

    The first call passes immediately.
    """

    def __init__(
        self,
        min_delay_s: float,
        *,
        jitter_s: float = 0.0,
        clock: Clock = time.monotonic,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self.min_delay_s = max(0.0, min_delay_s)
        self.jitter_s = max(0.0, jitter_s)
        self._clock = clock
        self._sleep = sleep
        self._last_call_s: float | None = None

    def wait(self) -> None:
        if self._last_call_s is not None:
            target_delay = self.min_delay_s + (
                random.random() * self.jitter_s if self.jitter_s else 0.0
            )
            since_last = self._clock() - self._last_call_s
            if target_delay > since_last:
                self._sleep(target_delay - since_last)
        self._last_call_s = self._clock()


class TokenBucketRateLimiter(RateLimiter):
    """
    Simple process-local token bucket.
    """

    def __init__(
        self,
        rps: float,
        *,
        burst: int = 1,
        clock: Clock = time.monotonic,
        sleep: Sleeper = time.sleep,
    ) -> None:
        if rps <= 0:
            raise ValueError("rps must be positive")
        self.rps = rps
        self.burst = max(1, burst)
        self._clock = clock
        self._sleep = sleep
        self._tokens: float = float(self.burst)
        self._last_refill_s: float = clock()

    def _refill(self) -> None:
        now = self._clock()
        dt = now - self._last_refill_s
        self._tokens = min(float(self.burst), self._tokens + dt * self.rps)
        self._last_refill_s = now

    def wait(self) -> None:
        self._refill()
        if self._tokens < 1.0:
            self._sleep((1.0 - self._tokens) / self.rps)
            self._refill()
        self._tokens = max(0.0, self._tokens - 1.0)


def create_rate_limiter(strategy: str = "fixed", *, delay_s: float = 3.0, burst: int = 1) -> RateLimiter:
    """
    Build a limiter from configuration.

    Args:
        strategy: "fixed", "token_bucket" or "none"
        delay_s: Minimum seconds between calls (token bucket: 1 / rps)
        burst: Token bucket capacity
    """
    if strategy == "none" or delay_s <= 0:
        return NoopRateLimiter()
    if strategy == "fixed":
        return FixedDelayRateLimiter(delay_s)
    if strategy == "token_bucket":
        return TokenBucketRateLimiter(1.0 / delay_s, burst=burst)
    raise ValueError(f"Unknown rate limit strategy: {strategy}")
