"""
Network presets and client factories.

Presets are immutable values: pinning a client to a network means copying
the preset's chain hash and public key into that client's options.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Final

import yaml

from drand_client.chain import HttpCachingChain
from drand_client.client import FastestNodeClient, HttpChainClient
from drand_client.config import DEFAULT_CHAIN_OPTIONS, ChainOptions, HttpOptions
from drand_client.types import ChainInfo, ChainVerificationParams


@dataclass(frozen=True, slots=True)
class NetworkPreset:
    """A known drand network: where it is served and what it must look like."""

    name: str
    """Short name (e.g. "quicknet")."""

    urls: tuple[str, ...]
    """Base URLs serving the chain, preferred first."""

    info: ChainInfo
    """The chain description every node must report."""

    @property
    def url(self) -> str:
        """Preferred base URL."""
        return self.urls[0]

    def verification_params(self) -> ChainVerificationParams:
        """Params pinning clients to this chain."""
        return ChainVerificationParams.from_chain_info(self.info)

    def chain_options(self, base: ChainOptions = DEFAULT_CHAIN_OPTIONS) -> ChainOptions:
        """`base` with chain verification pinned to this network."""
        return replace(base, chain_verification_params=self.verification_params())

    def client(
        self,
        options: ChainOptions = DEFAULT_CHAIN_OPTIONS,
        http_options: HttpOptions | None = None,
    ) -> HttpChainClient:
        """Client for the preferred URL, pinned to this chain."""
        pinned = self.chain_options(options)
        http_options = http_options or HttpOptions()
        return HttpChainClient(
            HttpCachingChain(self.url, pinned, http_options), pinned, http_options
        )

    def fastest_node_client(
        self,
        options: ChainOptions = DEFAULT_CHAIN_OPTIONS,
        http_options: HttpOptions | None = None,
    ) -> FastestNodeClient:
        """Client over every URL of the network, pinned to this chain."""
        return FastestNodeClient(list(self.urls), self.chain_options(options), http_options)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NetworkPreset:
        """Build a preset from `{name, urls, info}`."""
        urls = data.get("urls")
        if not isinstance(urls, list) or not urls:
            raise ValueError("network preset needs a non-empty 'urls' list")
        return cls(
            name=str(data["name"]),
            urls=tuple(str(url).rstrip("/") for url in urls),
            info=ChainInfo.model_validate(data["info"]),
        )

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> NetworkPreset:
        """
        Load a preset from a YAML file.

        Expected layout::

            name: mynet
            urls:
            - https://drand.example.org
            info:
              public_key: 868f...
              period: 30
              genesis_time: 1595431050
              hash: 8990...
              groupHash: 176f...
              schemeID: pedersen-bls-chained
              metadata:
                beaconID: default
        """
        with Path(path).open() as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")
        return cls.from_dict(data)


DEFAULT_CHAIN_URL: Final = "https://api.drand.sh"
"""Mainnet 'default' chain (30s, chained)."""

DEFAULT_CHAIN_INFO: Final = ChainInfo(
    public_key=(
        "868f005eb8e6e4ca0a47c8a77ceaa5309a47978a7c71bc5cce96366b5d7a5699"
        "37c529eeda66c7293784a9402801af31"
    ),
    period=30,
    genesis_time=1595431050,
    hash="8990e7a9aaed2ffed73dbd7092123d6f289930540d7651336225dc172e51b2ce",
    group_hash="176f93498eac9ca337150b46d21dd58673ea4e3581185f869672e59fa4cb390a",
    scheme_id="pedersen-bls-chained",
    metadata={"beacon_id": "default"},
)

QUICKNET_CHAIN_URL: Final = (
    "https://api.drand.sh/52db9ba70e0cc0f6eaf7803dd07447a1f5477735fd3f661792ba94600c84e971"
)
"""Mainnet 'quicknet' chain (3s, unchained, G1 signatures)."""

QUICKNET_CHAIN_INFO: Final = ChainInfo(
    public_key=(
        "83cf0f2896adee7eb8b5f01fcad3912212c437e0073e911fb90022d3e760183c"
        "8c4b450b6a0a6c3ac6a5776a2d1064510d1fec758c921cc22b0e17e63aaf4bcb"
        "5ed66304de9cf809bd274ca73bab4af5a6e9c76a4bc09e76eae8991ef5ece45a"
    ),
    period=3,
    genesis_time=1692803367,
    hash="52db9ba70e0cc0f6eaf7803dd07447a1f5477735fd3f661792ba94600c84e971",
    group_hash="f477d5c89f21a17c863a7f937c6a6d15859414d2be09cd448d4279af331c5d3e",
    scheme_id="bls-unchained-g1-rfc9380",
    metadata={"beacon_id": "quicknet"},
)

TESTNET_DEFAULT_CHAIN_URL: Final = "https://pl-us.testnet.drand.sh"
"""Testnet 'default' chain (25s, chained)."""

TESTNET_DEFAULT_CHAIN_INFO: Final = ChainInfo(
    public_key=(
        "922a2e93828ff83345bae533f5172669a26c02dc76d6bf59c80892e12ab1455c"
        "229211886f35bb56af6d5bea981024df"
    ),
    period=25,
    genesis_time=1590445175,
    hash="7672797f548f3f4748ac4bf3352fc6c6b6468c9ad40ad456a397545c6e2df5bf",
    group_hash="4dd408e5fdff9323c76a9b6f087ba8fdc5a6da907bd9217d9d10f2287d081957",
    scheme_id="pedersen-bls-chained",
    metadata={"beacon_id": "default"},
)

TESTNET_QUICKNET_CHAIN_URL: Final = (
    "https://pl-us.testnet.drand.sh/"
    "cc9c398442737cbd141526600919edd69f1d6f9b4adb67e4d912fbc64341a9a5"
)
"""Testnet 'quicknet-t' chain (3s, unchained, G1 signatures)."""

TESTNET_QUICKNET_CHAIN_INFO: Final = ChainInfo(
    public_key=(
        "b15b65b46fb29104f6a4b5d1e11a8da6344463973d423661bb0804846a0ecd1e"
        "f93c25057f1c0baab2ac53e56c662b66072f6d84ee791a3382bfb055afab1e6a"
        "375538d8ffc451104ac971d2dc9b168e2d3246b0be2015969cbaac298f6502da"
    ),
    period=3,
    genesis_time=1689232296,
    hash="cc9c398442737cbd141526600919edd69f1d6f9b4adb67e4d912fbc64341a9a5",
    group_hash="40d49d910472d4adb1d67f65db8332f11b4284eecf05c05c5eacd5eef7d40e2d",
    scheme_id="bls-unchained-g1-rfc9380",
    metadata={"beacon_id": "quicknet-t"},
)

DEFAULT: Final = NetworkPreset("default", (DEFAULT_CHAIN_URL,), DEFAULT_CHAIN_INFO)
QUICKNET: Final = NetworkPreset("quicknet", (QUICKNET_CHAIN_URL,), QUICKNET_CHAIN_INFO)
TESTNET_DEFAULT: Final = NetworkPreset(
    "testnet-default", (TESTNET_DEFAULT_CHAIN_URL,), TESTNET_DEFAULT_CHAIN_INFO
)
TESTNET_QUICKNET: Final = NetworkPreset(
    "testnet-quicknet", (TESTNET_QUICKNET_CHAIN_URL,), TESTNET_QUICKNET_CHAIN_INFO
)

PRESETS: Final[dict[str, NetworkPreset]] = {
    preset.name: preset for preset in (DEFAULT, QUICKNET, TESTNET_DEFAULT, TESTNET_QUICKNET)
}
"""Presets by name."""


def default_client(http_options: HttpOptions | None = None) -> HttpChainClient:
    """Client pinned to the mainnet 'default' chain."""
    return DEFAULT.client(http_options=http_options)


def quicknet_client(http_options: HttpOptions | None = None) -> HttpChainClient:
    """Client pinned to the mainnet 'quicknet' chain."""
    return QUICKNET.client(http_options=http_options)


def testnet_default_client(http_options: HttpOptions | None = None) -> HttpChainClient:
    """Client pinned to the testnet 'default' chain."""
    return TESTNET_DEFAULT.client(http_options=http_options)


def testnet_quicknet_client(http_options: HttpOptions | None = None) -> HttpChainClient:
    """Client pinned to the testnet 'quicknet-t' chain."""
    return TESTNET_QUICKNET.client(http_options=http_options)
