"""
Watching a chain for new beacons.

A watcher is an infinite, cancellable stream of verified beacons:

1. Init: fetch the verified chain description once. Failing here ends the
   stream with that error.
2. Await: compute when the next round becomes available. If that time has
   passed (started mid-round, or after downtime) go on at once; otherwise
   wait until then or until cancelled, whichever comes first.
3. Fetch: get and verify the round, retrying a few times. On success emit it
   and move to the next round. If every attempt fails, the error is raised
   from that pull only: the watcher keeps its position, so pulling again
   retries the same round.
4. Cancelled: checked before and during each wait, never mid-fetch. Ends the
   stream cleanly, without error.

Emitted rounds are strictly increasing without gaps. The first one is the
round current at the time the watcher starts.

The watcher is an explicit async iterator rather than an async generator:
a generator that raises is finished for good, which would make every
transient node failure fatal to the stream.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from time import time as wall_time

from drand_client.chain import RoundClock, require_chain_info
from drand_client.client import ChainClient
from drand_client.config import WatchOptions
from drand_client.errors import DrandError
from drand_client.metrics import beacons_watched
from drand_client.types import Beacon

logger = logging.getLogger(__name__)


class BeaconWatcher:
    """Async iterator over the beacons of a chain as they are published."""

    def __init__(
        self,
        client: ChainClient,
        cancel: asyncio.Event | None = None,
        options: WatchOptions | None = None,
        time_fn: Callable[[], float] = wall_time,
    ) -> None:
        self._client = client
        self._cancel = cancel if cancel is not None else asyncio.Event()
        self._options = options or WatchOptions()
        self._time_fn = time_fn

        self._clock: RoundClock | None = None
        self._round = 0
        self._previous: Beacon | None = None
        self._done = False

    @property
    def next_round(self) -> int | None:
        """Round the next pull will emit, once initialized."""
        if self._clock is None:
            return None
        return self._round

    @property
    def is_done(self) -> bool:
        """Whether the stream has ended."""
        return self._done

    def cancel(self) -> None:
        """Request termination. Takes effect at the next wait."""
        self._cancel.set()

    def __aiter__(self) -> BeaconWatcher:
        return self

    async def __anext__(self) -> Beacon:
        if self._done or self._cancel.is_set():
            self._done = True
            raise StopAsyncIteration

        clock = self._clock if self._clock is not None else await self._init()

        if not await self._wait_until(clock.time_of_round(self._round)):
            self._done = True
            raise StopAsyncIteration

        beacon = await self._fetch(self._round)

        self._previous = beacon
        self._round += 1
        beacons_watched.inc()
        return beacon

    async def _init(self) -> RoundClock:
        chain = self._client.chain()
        try:
            info = require_chain_info(await chain.info(), chain.base_url)
        except Exception:
            self._done = True
            raise

        clock = RoundClock.from_chain_info(info, self._time_fn)
        self._clock = clock
        self._round = clock.current_round()
        logger.info("Watching chain %s from round %d", chain.base_url, self._round)
        return clock

    async def _wait_until(self, deadline: float) -> bool:
        """
        Sleep until `deadline` unless cancelled first.

        Returns:
            True if the deadline was reached, False if cancelled.
        """
        delay = deadline - self._time_fn()
        if delay <= 0:
            return True

        try:
            await asyncio.wait_for(self._cancel.wait(), timeout=delay)
        except TimeoutError:
            return True
        return False

    async def _fetch(self, round: int) -> Beacon:
        attempts = max(1, self._options.retries_on_failure + 1)

        for attempt in range(1, attempts):
            try:
                return await self._client.get(round, self._previous)
            except DrandError as exc:
                logger.warning(
                    "Fetching round %d failed (attempt %d/%d): %s", round, attempt, attempts, exc
                )

        # Last attempt: its error goes to the caller.
        return await self._client.get(round, self._previous)


def watch(
    client: ChainClient,
    cancel: asyncio.Event | None = None,
    options: WatchOptions | None = None,
    time_fn: Callable[[], float] = wall_time,
) -> BeaconWatcher:
    """
    Watch a chain for new beacons.

    Args:
        client: Client serving verified beacons.
        cancel: Event that ends the stream when set.
        options: Retry tuning.
        time_fn: Time source (injectable for testing).
    """
    return BeaconWatcher(client, cancel, options, time_fn)
