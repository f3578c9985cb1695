"""
Chain descriptions fetched over HTTP.

Trust model:

- A node is untrusted until its `/info` document matches the caller's pinned
  chain hash and public key
- Once verified, a description is immutable truth for that chain, so it can be
  cached for the lifetime of the process without expiry
- A rejected description is never cached; the next call fetches and verifies again

When the caller pins nothing (`chain_verification_params=None`) every body is
accepted and returned as an `UnverifiedChainInfo`, whatever its shape. Its
structure is only checked by `require_chain_info` when a consumer needs the
round timing or the signature scheme.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from drand_client.config import DEFAULT_CHAIN_OPTIONS, ChainOptions, HttpOptions
from drand_client.metrics import chain_info_cache_hits
from drand_client.transport import decode_as, get_json
from drand_client.types import AnyChainInfo, ChainInfo, UnverifiedChainInfo

from .verification import verify_chain_info

logger = logging.getLogger(__name__)


class Chain(Protocol):
    """A source of verified chain descriptions for one base URL."""

    @property
    def base_url(self) -> str:
        """Base URL of the chain on its node."""
        ...

    async def info(self) -> AnyChainInfo:
        """Return the verified chain description, or the raw one when unpinned."""
        ...


@dataclass(slots=True)
class HttpChain:
    """
    Fetches and verifies a chain description on every call.

    Used directly by speed tests, where each call must really hit the node.
    """

    base_url: str
    """Base URL of the chain, without trailing slash."""

    options: ChainOptions = DEFAULT_CHAIN_OPTIONS
    """Verification and caching options."""

    http_options: HttpOptions = field(default_factory=HttpOptions)
    """Options passed to every request."""

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    async def info(self) -> AnyChainInfo:
        """
        Fetch `/info` and verify it.

        Without pinned params the body is returned unparsed.

        Raises:
            TransportError: If the node is unreachable.
            HttpStatusError: If the node answered non-2xx.
            MalformedResponseError: If the body is not JSON, or (when pinned) not a
                chain description.
            ChainVerificationError: If the description is not the pinned chain.
        """
        url = f"{self.base_url}/info"
        payload = await get_json(url, self.http_options, endpoint="info")

        params = self.options.chain_verification_params
        if params is None:
            return UnverifiedChainInfo(payload)

        info = decode_as(ChainInfo, url, payload)
        verify_chain_info(info, params)
        return info


@dataclass(slots=True)
class HttpCachingChain:
    """
    Verify-once-then-memoize front for `HttpChain`.

    Concurrent first calls are independent fetches; whichever verifies last
    populates the cache. Verification is idempotent and side-effect free, so
    two racing callers store identical values.
    """

    base_url: str
    """Base URL of the chain, without trailing slash."""

    options: ChainOptions = DEFAULT_CHAIN_OPTIONS
    """Verification and caching options."""

    http_options: HttpOptions = field(default_factory=HttpOptions)
    """Options passed to every request."""

    _chain: HttpChain = field(init=False, repr=False)
    """Uncached fetcher doing the actual work."""

    _cached: AnyChainInfo | None = field(default=None, init=False, repr=False)
    """The verified description, once one was fetched."""

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self._chain = HttpChain(self.base_url, self.options, self.http_options)

    async def info(self) -> AnyChainInfo:
        """
        Return the chain description, fetching it on first use.

        With `options.no_cache` every call fetches and verifies again.
        """
        if self._cached is not None and not self.options.no_cache:
            chain_info_cache_hits.inc()
            return self._cached

        info = await self._chain.info()

        if not self.options.no_cache:
            logger.debug("Cached chain info for %s", self.base_url)
            self._cached = info
        return info

    @property
    def cached(self) -> AnyChainInfo | None:
        """The cached description, if any."""
        return self._cached


def require_chain_info(info: AnyChainInfo, base_url: str) -> ChainInfo:
    """
    The structured description, parsing a raw one on demand.

    Raises:
        MalformedResponseError: If an unpinned body is not a chain description.
    """
    if isinstance(info, ChainInfo):
        return info
    return decode_as(ChainInfo, f"{base_url}/info", info.raw)
