"""Tests for fetching and caching chain descriptions."""

import pytest

from drand_client.chain import HttpCachingChain, HttpChain, require_chain_info
from drand_client.config import ChainOptions, HttpOptions
from drand_client.errors import (
    ChainVerificationError,
    HttpStatusError,
    MalformedResponseError,
    TransportError,
)
from drand_client.types import ChainInfo, ChainVerificationParams, UnverifiedChainInfo
from tests.drand_client.helpers import BASE_URL, CHAIN_HASH, PUBLIC_KEY, MockNode

INFO_URL = f"{BASE_URL}/info"

PINNED = ChainOptions(
    chain_verification_params=ChainVerificationParams(chain_hash=CHAIN_HASH, public_key=PUBLIC_KEY)
)


class TestHttpChain:
    """Tests for the uncached fetcher."""

    @pytest.mark.asyncio
    async def test_fetches_and_verifies(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """A matching description is returned as served."""
        node.serve_chain_info(BASE_URL, chain_info)

        info = await HttpChain(BASE_URL, PINNED, http_options).info()

        assert info == chain_info

    @pytest.mark.asyncio
    async def test_fetches_every_time(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """Nothing is memoized."""
        node.serve_chain_info(BASE_URL, chain_info)
        chain = HttpChain(BASE_URL, PINNED, http_options)

        await chain.info()
        await chain.info()

        assert node.calls(INFO_URL) == 2

    @pytest.mark.asyncio
    async def test_trailing_slash_stripped(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """The base URL is normalized."""
        node.serve_chain_info(BASE_URL, chain_info)

        chain = HttpChain(f"{BASE_URL}/", PINNED, http_options)
        await chain.info()

        assert chain.base_url == BASE_URL
        assert node.calls(INFO_URL) == 1

    @pytest.mark.asyncio
    async def test_wrong_chain_rejected(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """A node serving another chain is rejected."""
        node.serve_chain_info(BASE_URL, chain_info.copy(hash="00" * 32))

        with pytest.raises(ChainVerificationError):
            await HttpChain(BASE_URL, PINNED, http_options).info()

    @pytest.mark.asyncio
    async def test_unpinned_accepts_any_chain(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """Without params any description is returned as served."""
        other = chain_info.copy(hash="00" * 32)
        node.serve_chain_info(BASE_URL, other)

        info = await HttpChain(BASE_URL, http_options=http_options).info()

        assert info == UnverifiedChainInfo(other.to_json_dict())
        assert require_chain_info(info, BASE_URL) == other

    @pytest.mark.asyncio
    async def test_network_error(self, node: MockNode, http_options: HttpOptions) -> None:
        """Unreachable nodes raise a transport error naming the URL."""
        node.fail_always(INFO_URL)

        with pytest.raises(TransportError, match=INFO_URL):
            await HttpChain(BASE_URL, PINNED, http_options).info()

    @pytest.mark.asyncio
    async def test_error_status(self, node: MockNode, http_options: HttpOptions) -> None:
        """Non-2xx answers raise with their status."""
        node.reply_always(INFO_URL, {"error": "boom"}, status=500)

        with pytest.raises(HttpStatusError) as exc_info:
            await HttpChain(BASE_URL, PINNED, http_options).info()

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_malformed_body_pinned(self, node: MockNode, http_options: HttpOptions) -> None:
        """A pinned chain needs a well-formed description."""
        node.reply_always(INFO_URL, {"hello": "world"})

        with pytest.raises(MalformedResponseError):
            await HttpChain(BASE_URL, PINNED, http_options).info()

    @pytest.mark.asyncio
    async def test_malformed_body_unpinned(self, node: MockNode, http_options: HttpOptions) -> None:
        """Without params the body is not checked, only parsed as JSON."""
        body = {"invalid_field": "value", "missing_required_fields": True}
        node.reply_always(INFO_URL, body)

        info = await HttpChain(BASE_URL, http_options=http_options).info()

        assert info == UnverifiedChainInfo(body)
        with pytest.raises(MalformedResponseError, match=INFO_URL):
            require_chain_info(info, BASE_URL)

    @pytest.mark.asyncio
    async def test_non_json_body(self, node: MockNode, http_options: HttpOptions) -> None:
        """A body that is not JSON is malformed."""
        node.reply_always(INFO_URL, text="<html>")

        with pytest.raises(MalformedResponseError, match="invalid JSON"):
            await HttpChain(BASE_URL, http_options=http_options).info()


class TestHttpCachingChain:
    """Tests for the verify-once cache."""

    @pytest.mark.asyncio
    async def test_fetches_once(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """Two calls issue one request and return equal values."""
        node.serve_chain_info(BASE_URL, chain_info)
        chain = HttpCachingChain(BASE_URL, PINNED, http_options)

        first = await chain.info()
        second = await chain.info()

        assert first == second == chain_info
        assert node.calls(INFO_URL) == 1
        assert chain.cached == chain_info

    @pytest.mark.asyncio
    async def test_no_cache_fetches_every_time(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """With caching disabled each call hits the node."""
        node.serve_chain_info(BASE_URL, chain_info)
        options = ChainOptions(
            no_cache=True, chain_verification_params=PINNED.chain_verification_params
        )
        chain = HttpCachingChain(BASE_URL, options, http_options)

        await chain.info()
        await chain.info()

        assert node.calls(INFO_URL) == 2
        assert chain.cached is None

    @pytest.mark.asyncio
    async def test_rejected_description_not_cached(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """A failed verification leaves the cache empty, so the next call retries."""
        node.reply_once(INFO_URL, chain_info.copy(hash="00" * 32).to_json_dict())
        node.serve_chain_info(BASE_URL, chain_info)
        chain = HttpCachingChain(BASE_URL, PINNED, http_options)

        with pytest.raises(ChainVerificationError):
            await chain.info()
        assert chain.cached is None

        assert await chain.info() == chain_info
        assert node.calls(INFO_URL) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_not_cached(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """A network error is retried on the next call."""
        node.fail_once(INFO_URL)
        node.serve_chain_info(BASE_URL, chain_info)
        chain = HttpCachingChain(BASE_URL, PINNED, http_options)

        with pytest.raises(TransportError):
            await chain.info()

        assert await chain.info() == chain_info

    @pytest.mark.asyncio
    async def test_missing_fingerprint_rejected(
        self, node: MockNode, http_options: HttpOptions
    ) -> None:
        """A description without hash or public key fails verification, not decoding."""
        node.serve_chain_info(BASE_URL, {"period": 30, "genesis_time": 1595431050})

        with pytest.raises(ChainVerificationError) as exc_info:
            await HttpCachingChain(BASE_URL, PINNED, http_options).info()

        assert exc_info.value.missing_fields == ["hash", "public_key"]

    @pytest.mark.asyncio
    async def test_http_options_passed_through(
        self, node: MockNode, chain_info: ChainInfo
    ) -> None:
        """User agent and extra headers reach the node."""
        node.serve_chain_info(BASE_URL, chain_info)
        http_options = node.http_options(user_agent="my-app/1.0", headers={"X-Trace": "abc"})

        await HttpCachingChain(BASE_URL, PINNED, http_options).info()

        request = node.requests[0]
        assert request.headers["User-Agent"] == "my-app/1.0"
        assert request.headers["X-Trace"] == "abc"

    @pytest.mark.asyncio
    async def test_default_user_agent(
        self, node: MockNode, http_options: HttpOptions, chain_info: ChainInfo
    ) -> None:
        """The library identifies itself by default."""
        node.serve_chain_info(BASE_URL, chain_info)

        await HttpCachingChain(BASE_URL, PINNED, http_options).info()

        assert node.requests[0].headers["User-Agent"].startswith("drand-client-py-")

    @pytest.mark.asyncio
    async def test_unpinned_raw_body_cached(
        self, node: MockNode, http_options: HttpOptions
    ) -> None:
        """An unpinned description is cached as served, malformed or not."""
        body = {"invalid_field": "value"}
        node.reply_always(INFO_URL, body)
        chain = HttpCachingChain(BASE_URL, http_options=http_options)

        assert await chain.info() == UnverifiedChainInfo(body)
        assert await chain.info() == UnverifiedChainInfo(body)
        assert node.calls(INFO_URL) == 1


class TestRequireChainInfo:
    """Tests for reading period and genesis out of any description."""

    def test_verified_passes_through(self, chain_info: ChainInfo) -> None:
        """A parsed description is returned unchanged."""
        assert require_chain_info(chain_info, BASE_URL) is chain_info

    def test_raw_parsed(self) -> None:
        """A raw body with the timing fields parses."""
        raw = UnverifiedChainInfo({"period": 3, "genesis_time": 1692803367})

        info = require_chain_info(raw, BASE_URL)

        assert (info.period, info.genesis_time) == (3, 1692803367)

    def test_raw_without_timing_rejected(self) -> None:
        """A raw body missing period or genesis is malformed where it is read."""
        raw = UnverifiedChainInfo({"hash": CHAIN_HASH})

        with pytest.raises(MalformedResponseError, match=INFO_URL):
            require_chain_info(raw, BASE_URL)
