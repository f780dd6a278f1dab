"""Asynchronous request engine: redirect following, decoding and a single retry."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Any, Mapping

import httpx

from .decoder import RESPONSE_MAX_SIZE, drain, read_text
from .exceptions import MirrorRequestError
from .models import REDIRECT_STATUS_CODES, CustomizableHeader, RequestMethod, ResponseResult
from .request_options import RequestOptions, coerce_payload
from .security import resolve_redirect
from .transport import install_location_hook, open_stream

logger = logging.getLogger(__name__)


class RequestEngine:
    """Long-lived engine issuing GET/POST/PUT calls to https endpoints.

    Calls never raise for network, protocol or decoding failures; inspect the
    returned :class:`ResponseResult` instead.
    """

    max_redirects = 5
    response_max_size = RESPONSE_MAX_SIZE

    def __init__(
        self,
        *,
        user_agent: str | None = None,
        api_token: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        httpx_client: httpx.AsyncClient | None = None,
        user_agent_env_var: str = "MIRROR_REQUEST_USER_AGENT",
        token_env_var: str = "MIRROR_REQUEST_TOKEN",
    ) -> None:
        # Advisory only, nothing reads it for admission control.
        self._pending = 0
        self._custom_headers: dict[str, str] = {}

        agent = user_agent or os.getenv(user_agent_env_var)
        if agent:
            self.set_custom_header(CustomizableHeader.USER_AGENT, agent)
        token = api_token or os.getenv(token_env_var)
        if token:
            self.set_custom_header(CustomizableHeader.AUTHORIZATION, f"token {token}")
        if headers:
            for key, value in headers.items():
                self.set_custom_header(key, value)

        client_kwargs: dict[str, Any] = {"follow_redirects": False, "trust_env": False}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._httpx = httpx_client or httpx.AsyncClient(**client_kwargs)
        install_location_hook(self._httpx)

    async def __aenter__(self) -> "RequestEngine":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._httpx.aclose()

    @property
    def pending_requests(self) -> int:
        return self._pending

    def set_custom_header(self, key: CustomizableHeader | str, value: str) -> None:
        try:
            header = CustomizableHeader(key)
        except ValueError:
            raise ValueError(f"Header '{key}' cannot be customized") from None
        value = str(value)
        if not value.isascii() or not value.isprintable():
            raise ValueError(f"Header '{header.value}' value must be printable ASCII")
        self._custom_headers[header.value] = value

    def clear_custom_header(self, key: CustomizableHeader | str) -> None:
        self._custom_headers.pop(CustomizableHeader(key).value, None)

    def custom_header_names(self) -> list[str]:
        return list(self._custom_headers)

    @staticmethod
    def _log_failure(options: RequestOptions, message: str) -> None:
        if options.quiet:
            logger.debug(message)
        else:
            logger.error(message)

    async def _resolve(self, link: str, method: RequestMethod, options: RequestOptions) -> ResponseResult:
        custom_headers = dict(self._custom_headers)
        response: httpx.Response | None = None
        redirects = self.max_redirects

        while redirects > 0:
            redirects -= 1

            try:
                response = await open_stream(self._httpx, link, method, options, custom_headers)
            except MirrorRequestError as exc:
                self._log_failure(options, str(exc))
                return ResponseResult()

            if response.status_code in REDIRECT_STATUS_CODES:
                location = response.headers.get("location", "")
                target = resolve_redirect(link, location)
                if target is not None:
                    await drain(response)
                    link = target
                    continue

                await response.aclose()
                self._log_failure(options, f"Request Error: Invalid redirect link '{location}'")
                return ResponseResult(redirect_refused=True, stream=response)

            if not options.stubborn and not response.is_success:
                await response.aclose()
                self._log_failure(options, f"Request Error: Unexpected status code '{response.status_code}'")
                return ResponseResult(stream=response)

            try:
                text = await read_text(response, limit=self.response_max_size)
            except MirrorRequestError as exc:
                self._log_failure(options, str(exc))
                return ResponseResult(stream=response)

            return ResponseResult(stream=response, text=text)

        self._log_failure(options, "Request Error: Too many redirects")
        return ResponseResult(redirect_refused=True, stream=response)

    async def _request(
        self,
        link: str,
        method: RequestMethod,
        options: RequestOptions | None = None,
    ) -> ResponseResult:
        options = options or RequestOptions()
        self._pending += 1
        try:
            result = await self._resolve(link, method, options)
            if result.text is None and options.retry:
                assert options.timer is not None
                options = replace(options, retry=False)
                await options.timer.wait()
                result = await self._resolve(link, method, options)
            return result
        finally:
            self._pending -= 1

    async def get(self, link: str, options: RequestOptions | None = None) -> ResponseResult:
        return await self._request(link, RequestMethod.GET, options)

    @staticmethod
    def _bind_payload(payload: Any, options: RequestOptions | None) -> RequestOptions:
        options = options or RequestOptions()
        assert options.payload is None, "payload is bound by post/put"
        return replace(options, payload=coerce_payload(payload))

    async def post(self, link: str, payload: Any, options: RequestOptions | None = None) -> ResponseResult:
        return await self._request(link, RequestMethod.POST, self._bind_payload(payload, options))

    async def put(self, link: str, payload: Any, options: RequestOptions | None = None) -> ResponseResult:
        return await self._request(link, RequestMethod.PUT, self._bind_payload(payload, options))
