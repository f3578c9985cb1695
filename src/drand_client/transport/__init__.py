"""HTTP transport for drand nodes."""

from .http import decode_as, get_json, get_response

__all__ = ["decode_as", "get_json", "get_response"]
