"""Test helpers for drand client unit tests."""

from .bls import signed_beacon, signed_chain_info
from .builders import (
    BASE_URL,
    CHAIN_HASH,
    GENESIS_TIME,
    PERIOD,
    PUBLIC_KEY,
    make_beacon,
    make_chain_info,
    make_signature,
    make_unchained_info,
    randomness_of,
)
from .mocks import FakeClock, FakeSigner, MockNode

__all__ = [
    "BASE_URL",
    "CHAIN_HASH",
    "GENESIS_TIME",
    "PERIOD",
    "PUBLIC_KEY",
    "FakeClock",
    "FakeSigner",
    "MockNode",
    "make_beacon",
    "make_chain_info",
    "make_signature",
    "make_unchained_info",
    "randomness_of",
    "signed_beacon",
    "signed_chain_info",
]
