"""Data types shared across the drand client."""

from .base import WireModel
from .beacon import Beacon, HealthStatus
from .chain_info import (
    AnyChainInfo,
    ChainInfo,
    ChainMetadata,
    ChainVerificationParams,
    SchemeID,
    UnverifiedChainInfo,
)

__all__ = [
    "AnyChainInfo",
    "Beacon",
    "ChainInfo",
    "ChainMetadata",
    "ChainVerificationParams",
    "HealthStatus",
    "SchemeID",
    "UnverifiedChainInfo",
    "WireModel",
]
