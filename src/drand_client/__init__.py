"""
Client for the drand distributed randomness beacon.

Fetches beacons from interchangeable HTTP nodes and never returns a beacon or
chain description that was not verified as belonging to the expected chain.
"""

from .chain import HttpCachingChain, HttpChain, RoundClock, round_at, time_of_round
from .client import (
    ChainClient,
    FastestNodeClient,
    HttpChainClient,
    MultiBeaconNode,
    fetch_beacon,
    fetch_beacon_by_time,
)
from .config import DEFAULT_CHAIN_OPTIONS, ChainOptions, HttpOptions, WatchOptions
from .errors import (
    BeaconFailure,
    BeaconVerificationError,
    ChainVerificationError,
    DrandError,
    HttpStatusError,
    InvalidArgumentError,
    MalformedResponseError,
    TransportError,
)
from .types import Beacon, ChainInfo, ChainVerificationParams, HealthStatus, SchemeID
from .version import LIB_VERSION
from .watch import BeaconWatcher, watch

__all__ = [
    # Clients
    "ChainClient",
    "FastestNodeClient",
    "HttpCachingChain",
    "HttpChain",
    "HttpChainClient",
    "MultiBeaconNode",
    "BeaconWatcher",
    "fetch_beacon",
    "fetch_beacon_by_time",
    "watch",
    # Time
    "RoundClock",
    "round_at",
    "time_of_round",
    # Configuration
    "DEFAULT_CHAIN_OPTIONS",
    "ChainOptions",
    "HttpOptions",
    "WatchOptions",
    "LIB_VERSION",
    # Types
    "Beacon",
    "ChainInfo",
    "ChainVerificationParams",
    "HealthStatus",
    "SchemeID",
    # Exceptions
    "BeaconFailure",
    "BeaconVerificationError",
    "ChainVerificationError",
    "DrandError",
    "HttpStatusError",
    "InvalidArgumentError",
    "MalformedResponseError",
    "TransportError",
]
