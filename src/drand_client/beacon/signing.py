"""
Signature capability for beacon verification.

The pairing check itself lives behind the `SignatureVerifier` protocol so the
rest of the client never depends on a particular BLS implementation.

The default `BlsSignatureVerifier` uses py_ecc and covers the BLS12-381 schemes:

- `pedersen-bls-chained`: signature on G2, message = sha256(previous_signature || round)
- `pedersen-bls-unchained`: signature on G2, message = sha256(round)
- `bls-unchained-g1-rfc9380`: signature on G1, message = sha256(round)
- `bls-unchained-on-g1`: as above, but hashed to G1 with the G2 domain tag

The round is encoded as an 8-byte big-endian integer.
BN254 chains are not covered.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Final, Protocol

from py_ecc.bls import G2Basic
from py_ecc.bls.g2_primitives import pubkey_to_G1, signature_to_G2, subgroup_check
from py_ecc.bls.hash_to_curve import hash_to_G1
from py_ecc.fields import optimized_bls12_381_FQ12 as FQ12
from py_ecc.optimized_bls12_381 import G2, final_exponentiate, is_inf, neg, pairing

from drand_client.types import Beacon, ChainInfo, SchemeID

logger = logging.getLogger(__name__)

G2_DST: Final = b"BLS_SIG_BLS12381G2_XMD:SHA-256_SSWU_RO_NUL_"
"""Hash-to-curve domain of signatures on G2."""

G1_DST: Final = b"BLS_SIG_BLS12381G1_XMD:SHA-256_SSWU_RO_NUL_"
"""Hash-to-curve domain of signatures on G1 (RFC 9380)."""

G2_SCHEMES: Final = frozenset({SchemeID.PEDERSEN_BLS_CHAINED, SchemeID.PEDERSEN_BLS_UNCHAINED})
"""Schemes whose signatures live on G2 and public keys on G1."""

G1_SCHEMES: Final[dict[SchemeID, bytes]] = {
    SchemeID.BLS_UNCHAINED_G1_RFC9380: G1_DST,
    # Hashes to G1 with the G2 tag; that is what the network signs with.
    SchemeID.BLS_UNCHAINED_ON_G1: G2_DST,
}
"""Schemes whose signatures live on G1, with their hash-to-curve domain."""


class SignatureVerifier(Protocol):
    """Cryptographic capability used to verify beacons."""

    def supports(self, info: ChainInfo) -> bool:
        """Whether signatures of this chain's scheme can be checked."""
        ...

    def verify_signature(self, beacon: Beacon, info: ChainInfo, previous: Beacon | None) -> bool:
        """Check the beacon's signature against the chain's public key."""
        ...

    def digest_of_signature(self, signature: str) -> bytes:
        """Randomness a signature must hash to."""
        ...


def round_message(round: int, previous_signature: str | None = None) -> bytes:
    """
    Message signed for a round.

    Chained schemes prefix the previous round's signature bytes.
    """
    data = round.to_bytes(8, "big")
    if previous_signature is not None:
        data = bytes.fromhex(previous_signature) + data
    return hashlib.sha256(data).digest()


def verify_g1_signature(public_key: bytes, message: bytes, signature: bytes, dst: bytes) -> bool:
    """
    Check a G1 signature under a G2 public key.

    Accepts iff e(signature, g2) == e(H(message), public_key).

    Args:
        public_key: Compressed G2 point (96 bytes).
        message: The signed message.
        signature: Compressed G1 point (48 bytes).
        dst: Hash-to-curve domain separation tag.
    """
    if len(public_key) != 96 or len(signature) != 48:
        return False

    try:
        signature_point = pubkey_to_G1(signature)
        public_key_point = signature_to_G2(public_key)
    except ValueError:
        return False

    if is_inf(public_key_point) or not subgroup_check(public_key_point):
        return False
    if not subgroup_check(signature_point):
        return False

    message_point = hash_to_G1(message, dst, hashlib.sha256)
    result = final_exponentiate(
        pairing(G2, signature_point, final_exponentiate=False)
        * pairing(neg(public_key_point), message_point, final_exponentiate=False)
    )
    return result == FQ12.one()


class BlsSignatureVerifier:
    """BLS12-381 verification of drand signatures using py_ecc."""

    def supports(self, info: ChainInfo) -> bool:
        """G2 schemes and the BLS12-381 G1 schemes are supported."""
        return info.scheme in G2_SCHEMES or info.scheme in G1_SCHEMES

    def verify_signature(self, beacon: Beacon, info: ChainInfo, previous: Beacon | None) -> bool:
        """
        Run the pairing check.

        Malformed hex or points that do not decode count as invalid signatures.
        """
        scheme = info.scheme
        if info.public_key is None or scheme is None:
            return False

        try:
            previous_signature = beacon.previous_signature if info.is_chained else None
            message = round_message(beacon.round, previous_signature)
            public_key = bytes.fromhex(info.public_key)
            signature = bytes.fromhex(beacon.signature)
        except ValueError as exc:
            logger.debug("Undecodable beacon %d: %s", beacon.round, exc)
            return False

        if scheme in G1_SCHEMES:
            return verify_g1_signature(public_key, message, signature, G1_SCHEMES[scheme])
        if scheme in G2_SCHEMES:
            return G2Basic.Verify(public_key, message, signature)
        return False

    def digest_of_signature(self, signature: str) -> bytes:
        """Randomness is the SHA-256 of the raw signature bytes."""
        return hashlib.sha256(bytes.fromhex(signature)).digest()
