"""
Background latency measurement of drand nodes.

A speed test repeatedly runs a probe (fetching the chain description of one
node) and keeps a short rolling window of how long each run took. Failed runs
are recorded at maximum cost: a failing node must look maximally slow, never
simply absent from the average. A node that was never measured also reports
maximum cost, so it is treated as worst case until proven otherwise.
"""

from __future__ import annotations

import asyncio
import logging
import statistics
import sys
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Final, Generic, TypeVar

from drand_client.config import DEFAULT_SPEED_TEST_SAMPLES
from drand_client.errors import InvalidArgumentError
from drand_client.metrics import speed_test_duration

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_COST: Final[int] = sys.maxsize
"""Sentinel cost (milliseconds) of a failed or never-run probe."""

MIN_INTERVAL: Final[float] = 0.001
"""Shortest pause (seconds) between two probe launches, whatever the configured interval."""


class DroppingQueue(Generic[T]):
    """Fixed-capacity FIFO that drops its oldest element when full."""

    __slots__ = ("_items",)

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise InvalidArgumentError(f"capacity must be at least 1, got {capacity}")
        self._items: deque[T] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def capacity(self) -> int:
        """Maximum number of elements held."""
        # maxlen is always set by __init__.
        return self._items.maxlen or 0

    def push(self, value: T) -> None:
        """Append a value, evicting the oldest one if at capacity."""
        self._items.append(value)

    def values(self) -> list[T]:
        """Currently held elements, oldest first."""
        return list(self._items)

    def clear(self) -> None:
        """Remove every element."""
        self._items.clear()


Probe = Callable[[], Awaitable[object]]
"""An asynchronous liveness check. Raising means the node failed."""


@dataclass(slots=True)
class SpeedTest:
    """
    Runs a probe on a fixed interval and tracks its rolling average cost.

    Probe runs are independent tasks: a tick never waits for the previous
    run to finish, so a hanging node cannot stall its own measurement.
    """

    probe: Probe
    """The check to time."""

    interval: float
    """Seconds between two probe launches, never less than `MIN_INTERVAL`."""

    samples: int = DEFAULT_SPEED_TEST_SAMPLES
    """Size of the rolling window."""

    _queue: DroppingQueue[float] = field(init=False, repr=False)
    """Most recent costs in milliseconds."""

    _timer: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    """The repeating timer, while started."""

    _in_flight: set[asyncio.Task[None]] = field(default_factory=set, init=False, repr=False)
    """Probe runs that have not finished yet."""

    def __post_init__(self) -> None:
        self._queue = DroppingQueue(self.samples)

    @property
    def is_running(self) -> bool:
        """Whether the timer is started."""
        return self._timer is not None

    @property
    def in_flight(self) -> int:
        """Number of probe runs that have not finished yet."""
        return len(self._in_flight)

    def start(self) -> None:
        """
        Start probing every `interval` seconds.

        The first probe runs one interval after the call.
        Must be called from within a running event loop.
        """
        if self._timer is not None:
            logger.warning("Attempted to start a speed test, but it had already been started!")
            return
        self._timer = asyncio.get_running_loop().create_task(self._tick_forever())

    def stop(self) -> None:
        """
        Stop probing and forget every sample.

        Runs still in flight are cancelled so they cannot leak a stale sample
        into a later restart. Safe to call when not started.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._in_flight):
            task.cancel()
        self._in_flight.clear()
        self._queue.clear()

    def average(self) -> float:
        """Mean cost of the held samples in milliseconds, `MAX_COST` if none."""
        values = self._queue.values()
        if not values:
            return MAX_COST
        return min(statistics.fmean(values), MAX_COST)

    def values(self) -> list[float]:
        """Held samples, oldest first."""
        return self._queue.values()

    def record(self, cost: float) -> None:
        """Push one cost sample (milliseconds)."""
        self._queue.push(cost)

    async def _tick_forever(self) -> None:
        delay = max(self.interval, MIN_INTERVAL)
        while True:
            await asyncio.sleep(delay)
            task = asyncio.create_task(self._run_probe())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

    async def _run_probe(self) -> None:
        started = time.perf_counter()
        try:
            await self.probe()
        except Exception as exc:
            logger.debug("Speed test probe failed: %s", exc)
            self.record(MAX_COST)
            return

        elapsed = time.perf_counter() - started
        speed_test_duration.observe(elapsed)
        self.record(elapsed * 1000)


def create_speed_test(
    probe: Probe, interval: float, samples: int = DEFAULT_SPEED_TEST_SAMPLES
) -> SpeedTest:
    """Build a (not yet started) speed test."""
    return SpeedTest(probe=probe, interval=interval, samples=samples)
