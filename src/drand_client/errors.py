"""
Exception hierarchy for the drand client.

Callers branch on the exception class rather than on messages:

- `TransportError`: the node could not be reached at all
- `HttpStatusError`: the node answered, but with a non-2xx status
- `MalformedResponseError`: the node answered 2xx with an unusable body
- `ChainVerificationError`: the chain description is not the expected chain
- `BeaconVerificationError`: a beacon failed a cryptographic or linkage check
- `InvalidArgumentError`: the caller passed something nonsensical
"""

from __future__ import annotations

from enum import StrEnum


class DrandError(Exception):
    """
    Base exception for all drand client errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidArgumentError(DrandError, ValueError):
    """Raised when a caller supplies an argument outside its valid domain."""


class TransportError(DrandError):
    """
    Raised when a request fails below HTTP: DNS, connect, TLS or timeout.

    Attributes:
        url: The URL being requested.
    """

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Network error while fetching {url}: {detail}")


class HttpStatusError(DrandError):
    """
    Raised when a node answers with a non-2xx status.

    Attributes:
        url: The URL being requested.
        status_code: The HTTP status returned.
        body: The start of the response body, for diagnostics.
    """

    def __init__(self, url: str, status_code: int, body: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(f"Error response fetching {url} - got {status_code}")


class MalformedResponseError(DrandError):
    """
    Raised when a 2xx body is not valid JSON or does not have the expected shape.

    Attributes:
        url: The URL being requested.
        detail: What was wrong with the body.
    """

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Malformed response from {url}: {detail}")


class ChainVerificationError(DrandError):
    """
    Raised when a chain description does not match the verification params.

    Attributes:
        expected_hash: Chain hash the caller pinned.
        actual_hash: Chain hash the node reported (None if absent).
        expected_public_key: Public key the caller pinned.
        actual_public_key: Public key the node reported (None if absent).
    """

    def __init__(
        self,
        *,
        expected_hash: str,
        actual_hash: str | None,
        expected_public_key: str,
        actual_public_key: str | None,
    ) -> None:
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        self.expected_public_key = expected_public_key
        self.actual_public_key = actual_public_key

        msg = (
            "The chain info retrieved from the node did not match the verification params: "
            f"expected hash={expected_hash!r} public_key={expected_public_key!r}, "
            f"got hash={actual_hash!r} public_key={actual_public_key!r}"
        )
        if self.missing_fields:
            msg = f"{msg} (missing from response: {', '.join(self.missing_fields)})"

        super().__init__(msg)

    @property
    def missing_fields(self) -> list[str]:
        """Fields absent from the remote description, as opposed to present but wrong."""
        missing = []
        if self.actual_hash is None:
            missing.append("hash")
        if self.actual_public_key is None:
            missing.append("public_key")
        return missing


class BeaconFailure(StrEnum):
    """Why a beacon was rejected."""

    SIGNATURE = "signature"
    RANDOMNESS_DIGEST = "randomness_digest"
    MISSING_PREVIOUS_SIGNATURE = "missing_previous_signature"
    ROUND_LINKAGE = "round_linkage"
    UNEXPECTED_ROUND = "unexpected_round"
    UNSUPPORTED_SCHEME = "unsupported_scheme"


class BeaconVerificationError(DrandError):
    """
    Raised when a beacon fails verification.

    Attributes:
        round: The round of the offending beacon.
        reason: Which check failed.
        detail: Additional context.
    """

    def __init__(self, round: int, reason: BeaconFailure, detail: str | None = None) -> None:
        self.round = round
        self.reason = reason
        self.detail = detail

        msg = f"The beacon retrieved for round {round} was not valid: {reason.value}"
        if detail:
            msg = f"{msg} ({detail})"

        super().__init__(msg)
