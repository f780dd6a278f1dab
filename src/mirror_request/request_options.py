"""Per-request options for the request engine."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from pydantic import TypeAdapter

_JSON_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


@dataclass(frozen=True)
class RawPayload:
    data: bytes | str

    def to_bytes(self) -> bytes:
        if isinstance(self.data, str):
            return self.data.encode("utf-8")
        return bytes(self.data)


@dataclass(frozen=True)
class JsonPayload:
    """A value sent as compact JSON text.

    Anything pydantic can dump works: plain containers, models, dataclasses,
    datetimes.
    """

    value: Any

    def to_bytes(self) -> bytes:
        return _JSON_ADAPTER.dump_json(self.value)


Payload = Union[RawPayload, JsonPayload]


def coerce_payload(payload: Any) -> Payload:
    """Tag a caller payload: text and bytes go out raw, everything else as JSON."""
    if isinstance(payload, (RawPayload, JsonPayload)):
        return payload
    if isinstance(payload, (str, bytes, bytearray)):
        return RawPayload(bytes(payload) if isinstance(payload, bytearray) else payload)
    return JsonPayload(payload)


@dataclass(frozen=True)
class SleepTimer:
    """Caller-supplied delay used before the single retry."""

    timer: Callable[[float], Awaitable[None]]
    timeout: float

    @classmethod
    def asyncio(cls, timeout: float) -> "SleepTimer":
        return cls(timer=asyncio.sleep, timeout=timeout)

    async def wait(self) -> None:
        await self.timer(self.timeout)


@dataclass(frozen=True)
class RequestOptions:
    payload: Payload | None = None
    timer: SleepTimer | None = None  # required when retry is set
    error_suppress: bool = False
    stubborn: bool = False  # decode the body even when the status is not 2xx
    retry: bool = False

    def __post_init__(self) -> None:
        assert not self.retry or self.timer is not None, "retry requires a sleep timer"

    @property
    def quiet(self) -> bool:
        """Whether failures are expected and should be logged at debug level."""
        return self.error_suppress or self.retry
