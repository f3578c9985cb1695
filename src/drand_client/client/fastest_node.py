"""
Client that routes every request to the currently fastest node.

Each candidate node gets its own speed test, probing "fetch and verify the
chain description" in the background. Foreground requests only read the
rolling averages, they never wait on a measurement.

Degenerate cases:

- No URL: construction error
- One URL: nothing to choose from, speed testing is skipped entirely
- Every node failing: the first URL is used rather than failing outright
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Self

from drand_client.chain import Chain, HttpCachingChain, HttpChain
from drand_client.config import (
    DEFAULT_CHAIN_OPTIONS,
    DEFAULT_SPEED_TEST_INTERVAL,
    DEFAULT_SPEED_TEST_SAMPLES,
    ChainOptions,
    HttpOptions,
)
from drand_client.errors import InvalidArgumentError
from drand_client.types import Beacon

from .http_client import HttpChainClient
from .speedtest import SpeedTest, create_speed_test

logger = logging.getLogger(__name__)


class FastestNodeClient:
    """Serves verified beacons from whichever candidate node is fastest."""

    def __init__(
        self,
        base_urls: list[str],
        options: ChainOptions = DEFAULT_CHAIN_OPTIONS,
        http_options: HttpOptions | None = None,
        speed_test_interval: float = DEFAULT_SPEED_TEST_INTERVAL,
        speed_test_samples: int = DEFAULT_SPEED_TEST_SAMPLES,
    ) -> None:
        if not base_urls:
            raise InvalidArgumentError("Can't optimise an empty list of base URLs!")

        self.base_urls = [url.rstrip("/") for url in base_urls]
        self._options = options
        self.http_options = http_options or HttpOptions()
        self.speed_test_interval = speed_test_interval
        self.speed_test_samples = speed_test_samples

        # One long-lived client per node, so each keeps its verified chain cache.
        self._clients = {
            url: HttpChainClient(
                HttpCachingChain(url, options, self.http_options), options, self.http_options
            )
            for url in self.base_urls
        }

        self.speed_tests: list[SpeedTest] = []
        """Running speed tests, in the order of `base_urls`."""

        self._warned_single_url = False

    @property
    def options(self) -> ChainOptions:
        """Verification and caching options."""
        return self._options

    def start(self) -> None:
        """Start one background speed test per node. Must run inside an event loop."""
        if len(self.base_urls) == 1:
            if not self._warned_single_url:
                logger.warning(
                    "There was only a single base URL in the `FastestNodeClient` - "
                    "not running speed testing"
                )
                self._warned_single_url = True
            return

        if self.speed_tests:
            logger.warning("Attempted to start a FastestNodeClient that was already started!")
            return

        for url in self.base_urls:
            # A fresh uncached chain per node, so each probe really hits the network.
            probe_chain = HttpChain(url, self._options, self.http_options)
            test = create_speed_test(
                probe_chain.info, self.speed_test_interval, self.speed_test_samples
            )
            test.start()
            self.speed_tests.append(test)

        logger.info("Started speed testing %d nodes", len(self.speed_tests))

    def stop(self) -> None:
        """Stop every speed test and discard their samples."""
        for test in self.speed_tests:
            test.stop()
        self.speed_tests = []

    def current(self) -> str:
        """
        Base URL of the fastest node.

        Ties, including every node looking failed, go to the earliest URL.
        """
        if not self.speed_tests:
            return self.base_urls[0]

        # min() keeps the first of equal elements, which preserves list order on ties.
        best_url, _ = min(
            zip(self.base_urls, self.speed_tests, strict=True),
            key=lambda pair: pair[1].average(),
        )
        return best_url

    def current_client(self) -> HttpChainClient:
        """Client bound to the fastest node."""
        return self._clients[self.current()]

    def chain(self) -> Chain:
        """Chain of the fastest node."""
        return self.current_client().chain()

    async def latest(self) -> Beacon:
        """Most recent verified beacon from the fastest node."""
        return await self.current_client().latest()

    async def get(self, round: int, previous: Beacon | None = None) -> Beacon:
        """Verified beacon of `round` from the fastest node."""
        return await self.current_client().get(round, previous)

    async def get_by_time(self, t: float) -> Beacon:
        """Verified beacon available at Unix time `t` from the fastest node."""
        return await self.current_client().get_by_time(t)

    async def __aenter__(self) -> Self:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
