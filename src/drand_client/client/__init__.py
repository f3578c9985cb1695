"""Beacon clients: single node, fastest of several nodes, multi-chain node."""

from .fastest_node import FastestNodeClient
from .http_client import (
    ChainClient,
    HttpChainClient,
    fetch_beacon,
    fetch_beacon_by_time,
    round_for_time,
)
from .multi_beacon import MultiBeaconNode
from .speedtest import MAX_COST, MIN_INTERVAL, DroppingQueue, SpeedTest, create_speed_test

__all__ = [
    "MAX_COST",
    "MIN_INTERVAL",
    "ChainClient",
    "DroppingQueue",
    "FastestNodeClient",
    "HttpChainClient",
    "MultiBeaconNode",
    "SpeedTest",
    "create_speed_test",
    "fetch_beacon",
    "fetch_beacon_by_time",
    "round_for_time",
]
