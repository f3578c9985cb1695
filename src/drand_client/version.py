"""Library version, also advertised to nodes in the User-Agent header."""

from typing import Final

LIB_VERSION: Final = "1.3.0"
"""Semantic version of this package."""

DEFAULT_USER_AGENT: Final = f"drand-client-py-{LIB_VERSION}"
"""User-Agent sent with every request unless overridden."""
