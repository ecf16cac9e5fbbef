"""Unit tests for interval parsing and the cycle scheduler."""

import pytest

from hackflow.ingestion.scheduler import CycleScheduler, Schedule, parse_schedule


class TestParseSchedule:
    @pytest.mark.parametrize(
        "freq,seconds",
        [("6h", 21600), ("30m", 1800), ("10s", 10), ("3600", 3600), (120, 120), (" 6H ", 21600)],
    )
    def test_valid(self, freq, seconds):
        assert parse_schedule(freq) == Schedule(type="interval", value=seconds)

    @pytest.mark.parametrize("freq", [None, "", "0", 0, -5, "six hours", "h", "1d"])
    def test_invalid(self, freq):
        assert parse_schedule(freq) is None


class FakeTimeline:
    """Clock plus waiter that records waits and advances time."""

    def __init__(self, cycle_duration: float = 0.0):
        self.now = 0.0
        self.cycle_duration = cycle_duration
        self.waits = []
        self.starts = []

    def clock(self) -> float:
        return self.now

    def cycle(self) -> None:
        self.starts.append(self.now)
        self.now += self.cycle_duration

    def waiter(self, seconds: float) -> bool:
        self.waits.append(seconds)
        self.now += seconds
        return False


class TestCycleScheduler:
    def test_runs_immediately_then_on_interval(self):
        t = FakeTimeline(cycle_duration=60)
        scheduler = CycleScheduler(t.cycle, 3600, clock=t.clock, waiter=t.waiter)

        assert scheduler.run(max_cycles=3) == 3
        assert t.starts == [0, 3600, 7200]
        assert t.waits == [pytest.approx(3540), pytest.approx(3540)]

    def test_single_cycle_does_not_wait(self):
        t = FakeTimeline()
        scheduler = CycleScheduler(t.cycle, 3600, clock=t.clock, waiter=t.waiter)

        assert scheduler.run(max_cycles=1) == 1
        assert t.waits == []

    def test_overrun_skips_missed_ticks(self):
        t = FakeTimeline(cycle_duration=2500)
        scheduler = CycleScheduler(t.cycle, 1000, clock=t.clock, waiter=t.waiter)

        scheduler.run(max_cycles=2)

        assert t.starts == [0, 3000]
        assert t.waits == [pytest.approx(500)]

    def test_cycle_crash_does_not_stop_loop(self):
        t = FakeTimeline()
        calls = []

        def flaky_cycle():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")

        scheduler = CycleScheduler(flaky_cycle, 10, clock=t.clock, waiter=t.waiter)
        assert scheduler.run(max_cycles=2) == 2

    def test_stop_before_run(self):
        t = FakeTimeline()
        scheduler = CycleScheduler(t.cycle, 10, clock=t.clock, waiter=t.waiter)
        scheduler.stop()

        assert scheduler.run() == 0
        assert scheduler.stopped

    def test_stop_during_cycle_ends_after_it(self):
        t = FakeTimeline()
        scheduler = None

        def cycle():
            t.cycle()
            scheduler.stop()

        scheduler = CycleScheduler(cycle, 10, clock=t.clock, waiter=lambda s: scheduler.stopped)
        assert scheduler.run() == 1

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            CycleScheduler(lambda: None, 0)
