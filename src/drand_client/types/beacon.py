"""Randomness beacons and node health documents."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from .base import WireModel


class Beacon(WireModel):
    """One published randomness value, served at `/public/{round}`."""

    round: int = Field(ge=1)
    """Sequence number. Round 1 is the first value at or after genesis."""

    randomness: str
    """Hex SHA-256 digest of the signature."""

    signature: str
    """Hex encoded BLS signature."""

    previous_signature: str | None = None
    """Hex signature of the previous round (chained scheme only)."""


@dataclass(frozen=True, slots=True)
class HealthStatus:
    """Result of a `/health` probe."""

    status: int
    """HTTP status code returned by the node."""

    current: int
    """Latest round the node has, or -1 when unhealthy."""

    expected: int
    """Round the node should have by now, or -1 when unhealthy."""
