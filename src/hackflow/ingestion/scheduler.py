"""
hackflow.ingestion.scheduler

Fixed-period scheduling of ingestion cycles.

One cycle runs immediately on start, then one per interval. The scheduler
blocks for the whole cycle before computing the next wait, so cycles
never overlap; ticks missed by an overrunning cycle are skipped.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Schedule:
    type: str  # "interval"
    value: int  # seconds

    def summary(self) -> str:
        return f"{self.type}: {self.value}s"


def parse_schedule(freq: str | int | None) -> Schedule | None:
    """
    Parse an interval specification.

    Expected formats:
      6 * 3600 (int seconds)
      "6h", "30m", "10s"
      "3600" (seconds)
    """
    if freq is None:
        return None

    if isinstance(freq, int):
        return Schedule(type="interval", value=freq) if freq > 0 else None

    s_freq = str(freq).strip().lower()
    if not s_freq:
        return None

    seconds: int | None = None
    if s_freq.endswith("h") and s_freq[:-1].isdigit():
        seconds = int(s_freq[:-1]) * 3600
    elif s_freq.endswith("m") and s_freq[:-1].isdigit():
        seconds = int(s_freq[:-1]) * 60
    elif s_freq.endswith("s") and s_freq[:-1].isdigit():
        seconds = int(s_freq[:-1])
    elif s_freq.isdigit():
        seconds = int(s_freq)

    if not seconds:
        return None
    return Schedule(type="interval", value=seconds)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class CycleScheduler:
    """
    Runs ``cycle`` now and then every ``interval_s`` seconds until stopped.

    Args:
        cycle: Zero-argument callable running one full cycle
        interval_s: Period between cycle starts
        clock: Monotonic clock, injectable for tests
        waiter: Blocks for the given seconds, returns True if stopped early
    """

    def __init__(
        self,
        cycle: Callable[[], Any],
        interval_s: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        waiter: Callable[[float], bool] | None = None,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.cycle = cycle
        self.interval_s = float(interval_s)
        self._clock = clock
        self._stop = threading.Event()
        self._wait = waiter or self._stop.wait
        self.state = SchedulerState.IDLE
        self.cycles_run = 0

    def stop(self) -> None:
        """Request shutdown; takes effect before the next cycle starts."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def _run_once(self) -> None:
        self.state = SchedulerState.RUNNING
        try:
            self.cycle()
        except Exception:
            # Cycles isolate their own failures; this only guards the loop
            logger.error("Ingestion cycle crashed", exc_info=True)
        finally:
            self.state = SchedulerState.IDLE
            self.cycles_run += 1

    def next_wait(self, started_at: float) -> float:
        """Seconds to wait until the next tick aligned on ``started_at``."""
        elapsed = self._clock() - started_at
        if elapsed < self.interval_s:
            return self.interval_s - elapsed
        skipped = int(elapsed // self.interval_s)
        logger.warning(f"Cycle overran its interval, skipping {skipped} tick(s)")
        return self.interval_s * (skipped + 1) - elapsed

    def run(self, max_cycles: int | None = None) -> int:
        """
        Run cycles until ``stop()`` is called or ``max_cycles`` is reached.

        Returns:
            Number of cycles executed
        """
        while not self.stopped:
            started_at = self._clock()
            self._run_once()

            if max_cycles is not None and self.cycles_run >= max_cycles:
                break

            wait_s = self.next_wait(started_at)
            logger.info(f"Scraper idle, next run in {wait_s / 3600:.2f}h")
            if self._wait(wait_s):
                break

        return self.cycles_run
