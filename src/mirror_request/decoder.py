"""Streaming response body decoding with a hard size ceiling."""

from __future__ import annotations

import codecs
import logging
import zlib
from typing import cast

import httpx

from .exceptions import PayloadTooLargeError, StreamError, UnsupportedEncodingError

logger = logging.getLogger(__name__)

RESPONSE_MAX_SIZE = 16 * 1024 * 1024
REDIRECT_DRAIN_MAX = 64 * 1024

# Upper bound on bytes inflated per step, so the ceiling check runs before a
# compression bomb can expand much further.
_INFLATE_STEP = 64 * 1024


def _decompressor(encoding: str) -> zlib._Decompress | None:
    if encoding == "identity":
        return None
    if encoding == "gzip":
        return zlib.decompressobj(16 + zlib.MAX_WBITS)
    if encoding == "deflate":
        return zlib.decompressobj()
    raise UnsupportedEncodingError(f"Request Error: Unknown encoding '{encoding}'")


class BodyDecoder:
    """Accumulates decoded text from raw body chunks.

    The first terminal event wins: once the decoder has aborted (too large or
    failed) further ``feed``, ``fail`` and ``finish`` calls are ignored and
    partial text is gone.
    """

    def __init__(self, encoding: str = "identity", *, limit: int = RESPONSE_MAX_SIZE) -> None:
        self.encoding = encoding.strip().lower() or "identity"
        self.limit = limit
        self._inflate = _decompressor(self.encoding)
        self._text = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._parts: list[str] = []
        self._size = 0
        self._received = False
        self.aborted = False

    @property
    def size(self) -> int:
        return self._size

    def _abort(self) -> None:
        self.aborted = True
        self._parts = []
        self._size = 0

    def _append(self, text: str) -> None:
        if not text:
            return
        self._size += len(text)
        if self._size > self.limit:
            self._abort()
            raise PayloadTooLargeError("Request Error: Response payload too large")
        self._parts.append(text)

    def feed(self, chunk: bytes) -> None:
        if self.aborted or not chunk:
            return
        self._received = True
        if self._inflate is None:
            self._append(self._text.decode(chunk))
            return
        try:
            data = chunk
            while data:
                self._append(self._text.decode(self._inflate.decompress(data, _INFLATE_STEP)))
                data = self._inflate.unconsumed_tail
        except zlib.error as exc:
            self.fail(exc)

    def fail(self, cause: BaseException, message: str | None = None) -> None:
        """Abort with a :class:`StreamError` unless already aborted."""
        if self.aborted:
            return
        self._abort()
        raise StreamError(message or f"Request Error: {cause}", cause=cause)

    def finish(self) -> str | None:
        """Return the full text, or ``None`` if the decoder already aborted."""
        if self.aborted:
            return None
        if self._inflate is not None and self._received:
            try:
                self._append(self._text.decode(self._inflate.flush()))
            except zlib.error as exc:
                self.fail(exc)
            if not self._inflate.eof:
                self.fail(EOFError("unexpected end of file"), "Request Error: Unexpected end of file")
        self._append(self._text.decode(b"", final=True))
        text = "".join(self._parts)
        self._parts = []
        return text


async def read_text(response: httpx.Response, *, limit: int = RESPONSE_MAX_SIZE) -> str:
    """Read and decode the whole body of a streamed response, then close it."""
    try:
        decoder = BodyDecoder(response.headers.get("content-encoding", "identity"), limit=limit)
        try:
            async for chunk in response.aiter_raw():
                decoder.feed(chunk)
        except httpx.TransportError as exc:
            decoder.fail(exc)
        return cast(str, decoder.finish())
    finally:
        await response.aclose()


async def drain(response: httpx.Response, *, limit: int = REDIRECT_DRAIN_MAX) -> None:
    """Discard the body of a redirect response, reading at most ``limit`` bytes."""
    drained = 0
    try:
        async for chunk in response.aiter_raw():
            drained += len(chunk)
            if drained > limit:
                logger.debug("Redirect body exceeds %d bytes, closing connection", limit)
                break
    except httpx.TransportError as exc:
        logger.debug("Request Error: Failed to drain redirect body (%s)", exc)
    finally:
        await response.aclose()
