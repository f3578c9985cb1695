"""
Shared pytest fixtures for all drand client tests.

Provides the mock node and the fake signing capability.
"""

from __future__ import annotations

import pytest

from drand_client.config import HttpOptions
from drand_client.types import ChainInfo
from tests.drand_client.helpers import FakeSigner, MockNode, make_chain_info


@pytest.fixture
def node() -> MockNode:
    """An in-process node with no routes."""
    return MockNode()


@pytest.fixture
def http_options(node: MockNode) -> HttpOptions:
    """HTTP options routed to the mock node."""
    return node.http_options()


@pytest.fixture
def chain_info() -> ChainInfo:
    """A chained-scheme chain description."""
    return make_chain_info()


@pytest.fixture
def signer() -> FakeSigner:
    """Signature capability accepting every signature."""
    return FakeSigner()
