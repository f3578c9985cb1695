"""Beacon verification."""

from .signing import (
    G1_DST,
    G2_DST,
    BlsSignatureVerifier,
    SignatureVerifier,
    round_message,
    verify_g1_signature,
)
from .verification import DEFAULT_SIGNER, verify_beacon

__all__ = [
    "DEFAULT_SIGNER",
    "G1_DST",
    "G2_DST",
    "BlsSignatureVerifier",
    "SignatureVerifier",
    "round_message",
    "verify_beacon",
    "verify_g1_signature",
]
