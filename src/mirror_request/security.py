"""Link and redirect target validation."""

from __future__ import annotations

import re

import httpx

from .exceptions import ProtocolError

# Only two redirect shapes are ever followed; anything else is refused.
SAFE_ABSOLUTE_REDIRECT = re.compile(r"^https://(?:\w+\.)+\w+/", re.ASCII)
SAFE_RELATIVE_REDIRECT = re.compile(r"^/\w", re.ASCII)


def require_https(link: str) -> httpx.URL:
    """Parse ``link`` and reject anything that would go out in plaintext."""
    try:
        url = httpx.URL(link)
    except httpx.InvalidURL as exc:
        raise ProtocolError(f"Request Error: Invalid link '{link}'", cause=exc) from exc
    if url.scheme != "https":
        raise ProtocolError(f"Request Error: Unknown protocol '{url.scheme}:'")
    if not url.host:
        raise ProtocolError(f"Request Error: Missing host in link '{link}'")
    return url


def resolve_redirect(link: str, location: str) -> str | None:
    """Return the next link for a redirect, or ``None`` if it must not be followed.

    Absolute targets must be https with a dotted hostname followed by a path.
    Root-relative targets stay on the host of ``link``.
    """
    if SAFE_ABSOLUTE_REDIRECT.match(location):
        return location
    if SAFE_RELATIVE_REDIRECT.match(location):
        return "https://" + httpx.URL(link).host + location
    return None
