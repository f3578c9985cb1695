"""
Metrics module for observability.

Exposes drand client metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    beacons_watched,
    chain_info_cache_hits,
    generate_metrics,
    http_errors,
    http_requests,
    speed_test_duration,
    verification_failures,
)

__all__ = [
    "REGISTRY",
    "beacons_watched",
    "chain_info_cache_hits",
    "generate_metrics",
    "http_errors",
    "http_requests",
    "speed_test_duration",
    "verification_failures",
]
