"""Value types shared by the request engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

import httpx


class RequestMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"


class CustomizableHeader(str, Enum):
    """Headers callers may override; every other request header is fixed."""

    ACCEPT = "Accept"
    AUTHORIZATION = "Authorization"
    USER_AGENT = "User-Agent"

    @classmethod
    def _missing_(cls, value: object) -> "CustomizableHeader | None":
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Cache-Control": "no-cache",
        "Accept": "text/plain, text/*, */*;q=0.9",
        "Accept-Encoding": "deflate, gzip, identity",
    }
)

REDIRECT_STATUS_CODES = frozenset({301, 302, 307})


@dataclass(frozen=True)
class ResponseResult:
    """Outcome of one engine call.

    ``stream`` is absent only when no response head was obtained at all;
    ``text`` is present only on success.
    """

    redirect_refused: bool = False
    stream: httpx.Response | None = None
    text: str | None = None

    @property
    def ok(self) -> bool:
        return self.text is not None

    @property
    def status_code(self) -> int | None:
        if self.stream is None:
            return None
        return self.stream.status_code
