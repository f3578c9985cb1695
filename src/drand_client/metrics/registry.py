"""
Metric registry using prometheus_client.

Tracks requests to drand nodes, verification outcomes and node latency.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for drand client metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics
# and from the metrics of the application embedding this client.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Transport
# -----------------------------------------------------------------------------

http_requests = Counter(
    "drand_http_requests_total",
    "HTTP requests issued to drand nodes",
    ["endpoint"],
    registry=REGISTRY,
)

http_errors = Counter(
    "drand_http_errors_total",
    "Failed HTTP requests by kind",
    ["kind"],
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Verification
# -----------------------------------------------------------------------------

chain_info_cache_hits = Counter(
    "drand_chain_info_cache_hits_total",
    "Chain info lookups answered from the verified cache",
    registry=REGISTRY,
)

verification_failures = Counter(
    "drand_verification_failures_total",
    "Rejected chain descriptions and beacons",
    ["kind"],
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Watch and node selection
# -----------------------------------------------------------------------------

beacons_watched = Counter(
    "drand_beacons_watched_total",
    "Beacons emitted by watchers",
    registry=REGISTRY,
)

speed_test_duration = Histogram(
    "drand_speed_test_seconds",
    "Duration of successful node speed test probes",
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
