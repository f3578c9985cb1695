"""
Round Clock
===========

Time-to-round conversion for drand chains.

A chain produces round 1 at its genesis time and one new round every
`period` seconds afterwards. Round 0 does not exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from time import time as wall_time
from typing import Callable

from drand_client.errors import InvalidArgumentError
from drand_client.types import ChainInfo


def round_at(t: float, genesis_time: float, period: float) -> int:
    """
    Round published at or most recently before time `t`.

    Any time at or before genesis maps to round 1.
    """
    if period <= 0:
        raise InvalidArgumentError(f"period must be positive, got {period}")
    if t <= genesis_time:
        return 1
    return int((t - genesis_time) // period) + 1


def time_of_round(round: int, genesis_time: float, period: float) -> float:
    """Unix timestamp (seconds) at which `round` becomes available."""
    if round < 1:
        raise InvalidArgumentError(f"round must be at least 1, got {round}")
    return genesis_time + (round - 1) * period


@dataclass(frozen=True, slots=True)
class RoundClock:
    """
    Converts wall-clock time to rounds of one chain.

    All time values are in seconds (Unix timestamps).
    """

    genesis_time: float
    """Unix timestamp (seconds) when round 1 was produced."""

    period: float
    """Seconds between rounds."""

    time_fn: Callable[[], float] = wall_time
    """Time source function (injectable for testing)."""

    @classmethod
    def from_chain_info(
        cls, info: ChainInfo, time_fn: Callable[[], float] = wall_time
    ) -> RoundClock:
        """Build the clock of a (verified) chain description."""
        return cls(genesis_time=info.genesis_time, period=info.period, time_fn=time_fn)

    def current_time(self) -> float:
        """Get current wall-clock time."""
        return self.time_fn()

    def current_round(self) -> int:
        """Get the latest round that should be available now."""
        return round_at(self.current_time(), self.genesis_time, self.period)

    def round_at(self, t: float) -> int:
        """Round available at time `t`."""
        return round_at(t, self.genesis_time, self.period)

    def time_of_round(self, round: int) -> float:
        """Time at which `round` becomes available."""
        return time_of_round(round, self.genesis_time, self.period)

    def seconds_until_round(self, round: int) -> float:
        """
        Seconds to wait until `round` becomes available.

        Returns 0.0 if the round is already available.
        """
        return max(0.0, self.time_of_round(round) - self.current_time())
