"""Facade for a node that serves several chains."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from drand_client.chain import HttpCachingChain
from drand_client.config import DEFAULT_CHAIN_OPTIONS, ChainOptions, HttpOptions
from drand_client.errors import MalformedResponseError
from drand_client.transport import get_json, get_response
from drand_client.types import HealthStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MultiBeaconNode:
    """
    One node, possibly serving several chains at `{base_url}/{chain_hash}`.

    Chains are listed at `/chains`; the node's liveness is at `/health`.
    """

    base_url: str
    """Base URL of the node, without trailing slash."""

    options: ChainOptions = DEFAULT_CHAIN_OPTIONS
    """Options applied to every chain of the node."""

    http_options: HttpOptions = field(default_factory=HttpOptions)
    """Options passed to every request."""

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    async def chain_hashes(self) -> list[str]:
        """
        Hashes of the chains the node serves.

        Raises:
            MalformedResponseError: If the node does not return an array of strings.
        """
        url = f"{self.base_url}/chains"
        payload = await get_json(url, self.http_options, endpoint="chains")

        if not isinstance(payload, list):
            raise MalformedResponseError(url, f"Expected an array, got {type(payload).__name__}")
        if not all(isinstance(item, str) for item in payload):
            raise MalformedResponseError(url, "Expected an array of chain hashes")

        return payload

    async def chains(self) -> list[HttpCachingChain]:
        """One caching chain per chain the node serves."""
        return [
            HttpCachingChain(f"{self.base_url}/{chain_hash}", self.options, self.http_options)
            for chain_hash in await self.chain_hashes()
        ]

    async def health(self) -> HealthStatus:
        """
        Report the node's health.

        Any HTTP response is turned into a status: non-2xx, or a 2xx body that
        does not carry round numbers, reports -1 for both rounds.

        Raises:
            TransportError: Only if the node could not be reached at all.
        """
        url = f"{self.base_url}/health"
        response = await get_response(url, self.http_options, endpoint="health")

        if not response.is_success:
            return HealthStatus(status=response.status_code, current=-1, expected=-1)

        try:
            body = response.json()
            current = int(body["current"])
            expected = int(body["expected"])
        except (ValueError, TypeError, KeyError) as exc:
            logger.debug("Unusable health body from %s: %s", url, exc)
            return HealthStatus(status=response.status_code, current=-1, expected=-1)

        return HealthStatus(status=response.status_code, current=current, expected=expected)
