"""
Beacon client over a single drand node.

Composes the verified chain cache, the beacon verifier and the round clock
into "latest", "specific round" and "round at time" lookups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from drand_client.beacon import DEFAULT_SIGNER, SignatureVerifier, verify_beacon
from drand_client.chain import Chain, require_chain_info, round_at
from drand_client.config import DEFAULT_CHAIN_OPTIONS, ChainOptions, HttpOptions
from drand_client.errors import BeaconFailure, BeaconVerificationError, InvalidArgumentError
from drand_client.transport import decode_as, get_json
from drand_client.types import Beacon

logger = logging.getLogger(__name__)


class ChainClient(Protocol):
    """Anything that serves verified beacons of one chain."""

    @property
    def options(self) -> ChainOptions:
        """Verification and caching options."""
        ...

    def chain(self) -> Chain:
        """The chain whose beacons are served."""
        ...

    async def latest(self) -> Beacon:
        """Most recent beacon the node has."""
        ...

    async def get(self, round: int, previous: Beacon | None = None) -> Beacon:
        """Beacon of a given round."""
        ...

    async def get_by_time(self, t: float) -> Beacon:
        """Beacon available at Unix time `t` (seconds)."""
        ...


@dataclass(slots=True)
class HttpChainClient:
    """
    Serves verified beacons from one node.

    Requests are independent round trips: concurrent calls may complete in
    any order.
    """

    source: Chain
    """Source of the verified chain description."""

    options: ChainOptions = DEFAULT_CHAIN_OPTIONS
    """Verification and caching options."""

    http_options: HttpOptions = field(default_factory=HttpOptions)
    """Options passed to every request."""

    signer: SignatureVerifier = DEFAULT_SIGNER
    """Cryptographic capability for beacon signatures."""

    def chain(self) -> Chain:
        """The chain whose beacons are served."""
        return self.source

    @property
    def base_url(self) -> str:
        """Base URL of the chain on its node."""
        return self.source.base_url

    async def latest(self) -> Beacon:
        """
        Fetch and verify the node's most recent beacon.

        Raises:
            TransportError, HttpStatusError, MalformedResponseError: On fetch failure.
            ChainVerificationError: If the node serves another chain.
            BeaconVerificationError: If the beacon is invalid.
        """
        return await self._fetch_verified("latest", expected_round=None, previous=None)

    async def get(self, round: int, previous: Beacon | None = None) -> Beacon:
        """
        Fetch and verify the beacon of `round`.

        Args:
            round: Round number, at least 1.
            previous: Beacon of `round - 1`, to also check chain linkage.

        Raises:
            InvalidArgumentError: If `round` is below 1.
        """
        if round < 1:
            raise InvalidArgumentError(f"round must be at least 1, got {round}")
        return await self._fetch_verified(str(round), expected_round=round, previous=previous)

    async def get_by_time(self, t: float) -> Beacon:
        """Fetch the beacon available at Unix time `t` (seconds)."""
        return await self.get(await round_for_time(self, t))

    async def _fetch_verified(
        self, path: str, *, expected_round: int | None, previous: Beacon | None
    ) -> Beacon:
        # The chain description is verified before the beacon is even requested:
        # a node serving the wrong chain never gets to hand us a beacon.
        info = None
        if not self.options.disable_beacon_verification:
            info = require_chain_info(await self.source.info(), self.source.base_url)

        url = f"{self.source.base_url}/public/{path}"
        payload = await get_json(url, self.http_options, endpoint="public")
        beacon = decode_as(Beacon, url, payload)

        if info is None:
            return beacon

        if expected_round is not None and beacon.round != expected_round:
            raise BeaconVerificationError(
                beacon.round,
                BeaconFailure.UNEXPECTED_ROUND,
                f"requested round {expected_round}",
            )

        verify_beacon(beacon, info, previous, signer=self.signer)
        logger.debug("Verified beacon %d from %s", beacon.round, self.source.base_url)
        return beacon


async def round_for_time(client: ChainClient, t: float) -> int:
    """Round available at Unix time `t` (seconds) on the client's chain."""
    chain = client.chain()
    info = require_chain_info(await chain.info(), chain.base_url)
    return round_at(t, info.genesis_time, info.period)


async def fetch_beacon(client: ChainClient, round: int | None = None) -> Beacon:
    """Fetch a verified beacon: the latest one, or the given round."""
    if round is None:
        return await client.latest()
    return await client.get(round)


async def fetch_beacon_by_time(client: ChainClient, t: float) -> Beacon:
    """Fetch the verified beacon available at Unix time `t` (seconds)."""
    return await client.get_by_time(t)
