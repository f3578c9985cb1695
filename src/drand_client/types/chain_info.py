"""Chain description and the parameters used to trust it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import Field

from .base import WireModel


class SchemeID(StrEnum):
    """Signature schemes a drand chain can be produced with."""

    PEDERSEN_BLS_CHAINED = "pedersen-bls-chained"
    """Signatures on G2, each round signs the previous round's signature."""

    PEDERSEN_BLS_UNCHAINED = "pedersen-bls-unchained"
    """Signatures on G2, each round signs only its round number."""

    BLS_UNCHAINED_ON_G1 = "bls-unchained-on-g1"
    """Signatures on G1 with a non-standard hash-to-curve domain."""

    BLS_UNCHAINED_G1_RFC9380 = "bls-unchained-g1-rfc9380"
    """Signatures on G1 with the RFC 9380 domain (quicknet)."""

    BLS_BN254_UNCHAINED_ON_G1 = "bls-bn254-unchained-on-g1"
    """Signatures on the BN254 curve (EVM friendly chains)."""


class ChainMetadata(WireModel):
    """Metadata attached to a chain description."""

    beacon_id: str = Field(default="default", alias="beaconID")
    """Which chain this is on a node that serves several."""


class ChainInfo(WireModel):
    """
    A chain's self-reported description, served at `/info`.

    Everything derived from a node (round timing, signature scheme) comes
    from this document, so it is only trusted after its `hash` and
    `public_key` match what the caller expected.

    Both of those fields are optional here on purpose.
    A node omitting them must be rejected by chain verification with a
    useful diagnostic, not fail somewhere inside JSON parsing.
    """

    public_key: str | None = None
    """Hex encoded group public key."""

    period: int = Field(gt=0)
    """Seconds between two consecutive rounds."""

    genesis_time: int = Field(gt=0)
    """Unix timestamp (seconds) at which round 1 was produced."""

    hash: str | None = None
    """Hex fingerprint identifying the chain."""

    group_hash: str = Field(default="", alias="groupHash")
    """Hex hash of the group file that produced the chain."""

    scheme_id: str = Field(default=SchemeID.PEDERSEN_BLS_CHAINED.value, alias="schemeID")
    """
    Signature scheme identifier.

    Nodes predating multi-scheme support omit it; those chains are chained.
    """

    metadata: ChainMetadata = Field(default_factory=ChainMetadata)
    """Chain metadata (beacon ID)."""

    @property
    def scheme(self) -> SchemeID | None:
        """The scheme as a known enum member, or None if unrecognized."""
        try:
            return SchemeID(self.scheme_id)
        except ValueError:
            return None

    @property
    def is_chained(self) -> bool:
        """Whether each round's signature covers the previous signature."""
        return self.scheme_id == SchemeID.PEDERSEN_BLS_CHAINED


@dataclass(frozen=True, slots=True)
class ChainVerificationParams:
    """Fingerprint a chain description must carry to be trusted."""

    chain_hash: str
    """Expected `ChainInfo.hash`."""

    public_key: str
    """Expected `ChainInfo.public_key`."""

    @classmethod
    def from_chain_info(cls, info: ChainInfo) -> ChainVerificationParams:
        """Pin a known chain description."""
        return cls(chain_hash=info.hash or "", public_key=info.public_key or "")


@dataclass(frozen=True, slots=True)
class UnverifiedChainInfo:
    """
    A chain description accepted without pinning, kept exactly as served.

    Nothing about its structure is checked until a consumer needs the
    round timing or the signature scheme.
    """

    raw: Any
    """The decoded JSON body of `/info`."""


AnyChainInfo = ChainInfo | UnverifiedChainInfo
"""What a chain source returns: verified and structured, or unpinned and raw."""
