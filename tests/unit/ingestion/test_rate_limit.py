"""Unit tests for extraction rate limiters (fake clock, no real sleeping)."""

import pytest

from hackflow.ingestion.rate_limit import (
    FixedDelayRateLimiter,
    NoopRateLimiter,
    TokenBucketRateLimiter,
    create_rate_limiter,
)


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class TestFixedDelayRateLimiter:
    def test_first_call_passes_immediately(self):
        clock = FakeClock()
        FixedDelayRateLimiter(3.0, clock=clock, sleep=clock.sleep).wait()
        assert clock.sleeps == []

    def test_enforces_minimum_gap(self):
        clock = FakeClock()
        limiter = FixedDelayRateLimiter(3.0, clock=clock, sleep=clock.sleep)

        limiter.wait()
        clock.now += 1.0
        limiter.wait()

        assert clock.sleeps == [pytest.approx(2.0)]

    def test_no_sleep_when_gap_already_elapsed(self):
        clock = FakeClock()
        limiter = FixedDelayRateLimiter(3.0, clock=clock, sleep=clock.sleep)

        limiter.wait()
        clock.now += 5.0
        limiter.wait()

        assert clock.sleeps == []


class TestTokenBucketRateLimiter:
    def test_burst_then_throttle(self):
        clock = FakeClock()
        limiter = TokenBucketRateLimiter(1.0, burst=2, clock=clock, sleep=clock.sleep)

        limiter.wait()
        limiter.wait()
        assert clock.sleeps == []

        limiter.wait()
        assert clock.sleeps == [pytest.approx(1.0)]

    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValueError):
            TokenBucketRateLimiter(0)


class TestCreateRateLimiter:
    def test_strategies(self):
        assert isinstance(create_rate_limiter("fixed", delay_s=3), FixedDelayRateLimiter)
        assert isinstance(create_rate_limiter("token_bucket", delay_s=2), TokenBucketRateLimiter)
        assert isinstance(create_rate_limiter("none"), NoopRateLimiter)

    def test_zero_delay_is_noop(self):
        assert isinstance(create_rate_limiter("fixed", delay_s=0), NoopRateLimiter)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            create_rate_limiter("leaky_bucket")
