"""
Beacon verification.

A beacon is accepted only if:

1. The chain's scheme can be verified at all
2. For the chained scheme, it names the previous signature and, when the
   previous beacon is known, links to it (consecutive round, same signature)
3. Its randomness is the digest of its signature
4. Its signature verifies under the chain's public key

The digest check runs before the pairing check. It is much cheaper and a
mismatch there is a distinct, more specific diagnostic.
"""

from __future__ import annotations

from typing import NoReturn

from drand_client.errors import BeaconFailure, BeaconVerificationError
from drand_client.metrics import verification_failures
from drand_client.types import Beacon, ChainInfo

from .signing import BlsSignatureVerifier, SignatureVerifier

DEFAULT_SIGNER = BlsSignatureVerifier()
"""Default cryptographic capability."""


def _reject(beacon: Beacon, reason: BeaconFailure, detail: str | None = None) -> NoReturn:
    verification_failures.labels(kind=reason.value).inc()
    raise BeaconVerificationError(beacon.round, reason, detail)


def verify_beacon(
    beacon: Beacon,
    info: ChainInfo,
    previous: Beacon | None = None,
    *,
    signer: SignatureVerifier = DEFAULT_SIGNER,
) -> None:
    """
    Verify a beacon against its (already verified) chain description.

    Args:
        beacon: The beacon to check.
        info: The chain it claims to belong to.
        previous: The beacon of the preceding round, when the caller has it.
        signer: Cryptographic capability.

    Raises:
        BeaconVerificationError: With the failing check as `reason`.
    """
    if not signer.supports(info):
        _reject(beacon, BeaconFailure.UNSUPPORTED_SCHEME, f"scheme {info.scheme_id!r}")

    if info.is_chained:
        if beacon.previous_signature is None:
            _reject(beacon, BeaconFailure.MISSING_PREVIOUS_SIGNATURE)

        if previous is not None:
            if beacon.round != previous.round + 1:
                _reject(
                    beacon,
                    BeaconFailure.ROUND_LINKAGE,
                    f"expected round {previous.round + 1}",
                )
            if beacon.previous_signature != previous.signature:
                _reject(
                    beacon,
                    BeaconFailure.ROUND_LINKAGE,
                    f"previous signature does not match round {previous.round}",
                )

    try:
        digest = signer.digest_of_signature(beacon.signature)
    except ValueError:
        _reject(beacon, BeaconFailure.SIGNATURE, "signature is not hex")

    if beacon.randomness.lower() != digest.hex():
        _reject(beacon, BeaconFailure.RANDOMNESS_DIGEST)

    if not signer.verify_signature(beacon, info, previous):
        _reject(beacon, BeaconFailure.SIGNATURE)
