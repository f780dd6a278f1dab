"""Issue a single https request and hand back the streamed response head."""

from __future__ import annotations

import logging
from typing import Mapping

import httpx

from .exceptions import RequestConnectionError
from .models import DEFAULT_HEADERS, RequestMethod
from .request_options import RequestOptions
from .security import require_https

logger = logging.getLogger(__name__)

# Marks requests sent by the engine, and holds the Location header httpx must not see.
_ENGINE_REQUEST = "mirror_request.engine"
_STASHED_LOCATION = "mirror_request.location"


async def _stash_location(response: httpx.Response) -> None:
    # httpx parses Location inside send() to build next_request, and raises on
    # targets such as "javascript:..." before the engine can refuse them.
    if not response.request.extensions.get(_ENGINE_REQUEST):
        return
    location = response.headers.get("location")
    if location is not None:
        response.extensions[_STASHED_LOCATION] = location
        del response.headers["location"]


def install_location_hook(client: httpx.AsyncClient) -> None:
    hooks = client.event_hooks
    responses = list(hooks.get("response", []))
    if _stash_location not in responses:
        responses.insert(0, _stash_location)
    hooks["response"] = responses
    client.event_hooks = hooks


def _restore_location(response: httpx.Response) -> None:
    location = response.extensions.pop(_STASHED_LOCATION, None)
    if location is not None:
        response.headers["location"] = location


def build_headers(custom: Mapping[str, str]) -> dict[str, str]:
    merged = dict(DEFAULT_HEADERS)
    merged.update(custom)
    return merged


async def open_stream(
    client: httpx.AsyncClient,
    link: str,
    method: RequestMethod,
    options: RequestOptions,
    custom_headers: Mapping[str, str],
) -> httpx.Response:
    """Send one request without following redirects.

    The body of the returned response has not been read; the caller owns it
    and must close it.

    The engine's response hook keeps httpx from parsing ``Location``; it is
    put back on the response here, untouched.

    Raises:
        ProtocolError: ``link`` is not an https URL. Nothing is sent.
        RequestConnectionError: DNS, TCP, TLS or timeout failure.
    """
    logger.info("%s - %s", method.value, link)
    if custom_headers:
        logger.debug("Sending custom headers: '%s'", "', '".join(custom_headers))

    url = require_https(link)
    content = options.payload.to_bytes() if options.payload is not None else None
    request = client.build_request(
        method.value,
        url,
        headers=build_headers(custom_headers),
        content=content,
        extensions={_ENGINE_REQUEST: True},
    )
    try:
        response = await client.send(request, stream=True, follow_redirects=False)
    except httpx.TransportError as exc:
        raise RequestConnectionError(f"Request Error: {str(exc) or type(exc).__name__}", cause=exc) from exc
    _restore_location(response)
    return response
