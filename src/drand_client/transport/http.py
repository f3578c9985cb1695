"""
HTTP transport for talking to drand nodes.

Every request goes through here so that failures are classified once:

- Network-level failures become `TransportError`
- Non-2xx statuses become `HttpStatusError`
- Bodies that are not JSON, or not the expected shape, become `MalformedResponseError`

Timeouts are owned by this layer (`HttpOptions.timeout`); callers above it
never race their own timers against a request.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from drand_client.config import HttpOptions
from drand_client.errors import HttpStatusError, MalformedResponseError, TransportError
from drand_client.metrics import http_errors, http_requests

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


async def get_response(
    url: str, http_options: HttpOptions, *, endpoint: str = "other"
) -> httpx.Response:
    """
    Issue a GET request and return the response whatever its status.

    Args:
        url: Absolute URL to fetch.
        http_options: User agent, extra headers, timeout and transport.
        endpoint: Short endpoint label for metrics.

    Raises:
        TransportError: If no response was received.
    """
    http_requests.labels(endpoint=endpoint).inc()
    logger.debug("GET %s", url)

    try:
        async with httpx.AsyncClient(
            timeout=http_options.timeout,
            transport=http_options.transport,
        ) as client:
            return await client.get(url, headers=http_options.request_headers())
    except httpx.RequestError as exc:
        http_errors.labels(kind="transport").inc()
        raise TransportError(url, str(exc) or type(exc).__name__) from exc


async def get_json(url: str, http_options: HttpOptions, *, endpoint: str = "other") -> Any:
    """
    Issue a GET request and decode a 2xx JSON body.

    Raises:
        TransportError: If no response was received.
        HttpStatusError: If the status is not 2xx.
        MalformedResponseError: If the body is not JSON.
    """
    response = await get_response(url, http_options, endpoint=endpoint)

    if not response.is_success:
        http_errors.labels(kind="status").inc()
        raise HttpStatusError(url, response.status_code, response.text[:200])

    try:
        return response.json()
    except ValueError as exc:
        http_errors.labels(kind="malformed").inc()
        raise MalformedResponseError(url, f"invalid JSON: {exc}") from exc


def decode_as(model: type[ModelT], url: str, payload: Any) -> ModelT:
    """
    Validate a decoded JSON payload into a model.

    Raises:
        MalformedResponseError: If the payload does not fit the model.
    """
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        http_errors.labels(kind="malformed").inc()
        raise MalformedResponseError(
            url, f"not a valid {model.__name__}: {exc.error_count()} validation error(s)"
        ) from exc
