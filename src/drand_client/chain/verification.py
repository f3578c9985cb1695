"""
Chain verification.

Decides whether a node's self-reported chain description is the chain the
caller expects. Nothing derived from a description (round timing, signature
scheme, public key) may be used before it passes here.
"""

from __future__ import annotations

from drand_client.errors import ChainVerificationError
from drand_client.metrics import verification_failures
from drand_client.types import ChainInfo, ChainVerificationParams


def verify_chain_info(info: ChainInfo, params: ChainVerificationParams | None) -> None:
    """
    Check a chain description against the expected fingerprint.

    Comparison is literal string equality on both the hash and the public key.
    A field the node omitted never matches. Two empty strings do match:
    that is a degenerate but well-defined equality, not a missing field.

    Args:
        info: Description reported by the node.
        params: Expected fingerprint, or None when the caller disabled verification.

    Raises:
        ChainVerificationError: If either field differs or is absent.
    """
    if params is None:
        return

    if info.hash == params.chain_hash and info.public_key == params.public_key:
        return

    verification_failures.labels(kind="chain").inc()
    raise ChainVerificationError(
        expected_hash=params.chain_hash,
        actual_hash=info.hash,
        expected_public_key=params.public_key,
        actual_public_key=info.public_key,
    )
