"""Chain descriptions: round timing, verification and caching."""

from .clock import RoundClock, round_at, time_of_round
from .http_chain import Chain, HttpCachingChain, HttpChain, require_chain_info
from .verification import verify_chain_info

__all__ = [
    "Chain",
    "HttpCachingChain",
    "HttpChain",
    "RoundClock",
    "require_chain_info",
    "round_at",
    "time_of_round",
    "verify_chain_info",
]
