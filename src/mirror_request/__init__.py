"""HTTPS request engine with safe redirect following, decoding and a single retry."""

from .engine import RequestEngine
from .exceptions import (
    MirrorRequestError,
    PayloadTooLargeError,
    ProtocolError,
    RequestConnectionError,
    StreamError,
    UnsupportedEncodingError,
)
from .models import CustomizableHeader, RequestMethod, ResponseResult
from .request_options import JsonPayload, RawPayload, RequestOptions, SleepTimer

__all__ = [
    "CustomizableHeader",
    "JsonPayload",
    "MirrorRequestError",
    "PayloadTooLargeError",
    "ProtocolError",
    "RawPayload",
    "RequestConnectionError",
    "RequestEngine",
    "RequestMethod",
    "RequestOptions",
    "ResponseResult",
    "SleepTimer",
    "StreamError",
    "UnsupportedEncodingError",
]

__version__ = "0.1.0"
