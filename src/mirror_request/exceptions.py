"""Request engine exceptions.

These never reach callers of the public verbs: the resolver catches them and
folds them into a :class:`~mirror_request.models.ResponseResult`.
"""

from __future__ import annotations


class MirrorRequestError(Exception):
    """Base exception for all request engine failures."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ProtocolError(MirrorRequestError):
    """Raised when a link does not use the https scheme."""


class RequestConnectionError(MirrorRequestError):
    """Raised for transport-level failures like DNS, TCP and TLS errors."""


class UnsupportedEncodingError(MirrorRequestError):
    """Raised when a response declares a content-encoding we cannot decode."""


class PayloadTooLargeError(MirrorRequestError):
    """Raised when the decoded response text exceeds the size ceiling."""


class StreamError(MirrorRequestError):
    """Raised when the response body fails mid-stream."""
