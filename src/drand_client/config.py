"""
Client configuration.

Options are frozen values built once and passed into client constructors.
Nothing here is mutable process-wide state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Final

import httpx

from .types import ChainVerificationParams
from .version import DEFAULT_USER_AGENT

DEFAULT_HTTP_TIMEOUT: Final[float] = 10.0
"""HTTP request timeout in seconds."""

DEFAULT_SPEED_TEST_INTERVAL: Final[float] = 5.0
"""Seconds between two speed test probes of the same node."""

DEFAULT_SPEED_TEST_SAMPLES: Final[int] = 5
"""Number of probe results kept per node for the rolling average."""

DEFAULT_WATCH_RETRIES: Final[int] = 3
"""Immediate retries of a round fetch before a watcher surfaces the error."""

DRAND_NETWORK = os.environ.get("DRAND_NETWORK", "default").lower()
"""
The network preset used by the CLI when none is given. Defaults to mainnet "default".

Only the CLI reads it, and checks it against the known presets there.
"""


@dataclass(frozen=True, slots=True)
class ChainOptions:
    """How much a client verifies and caches."""

    disable_beacon_verification: bool = False
    """
    Accept beacons without checking their signature.

    Callers who set this fully trust the node they talk to.
    """

    no_cache: bool = False
    """Fetch and verify the chain description on every call instead of once."""

    chain_verification_params: ChainVerificationParams | None = None
    """Expected chain fingerprint. None disables chain verification."""


DEFAULT_CHAIN_OPTIONS: Final = ChainOptions()
"""No chain pinning, beacon verification on, caching on."""


@dataclass(frozen=True, slots=True)
class HttpOptions:
    """Options passed through unchanged to every request a component issues."""

    user_agent: str = DEFAULT_USER_AGENT
    """Value of the User-Agent header."""

    headers: dict[str, str] = field(default_factory=dict)
    """Additional headers."""

    timeout: float = DEFAULT_HTTP_TIMEOUT
    """Per-request timeout in seconds."""

    transport: httpx.AsyncBaseTransport | None = None
    """Custom httpx transport (injectable for testing)."""

    def request_headers(self) -> dict[str, str]:
        """Headers for one request."""
        return {"User-Agent": self.user_agent, **self.headers}


@dataclass(frozen=True, slots=True)
class WatchOptions:
    """Tuning for beacon watchers."""

    retries_on_failure: int = DEFAULT_WATCH_RETRIES
    """Immediate retries of a failed fetch before the error reaches the consumer."""
