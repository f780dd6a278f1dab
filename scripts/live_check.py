#!/usr/bin/env python3
"""Live check: exercise the request engine against public https endpoints."""

from __future__ import annotations

import asyncio
import sys
from typing import Awaitable, Callable

from mirror_request import RequestEngine, RequestOptions, ResponseResult, SleepTimer
from mirror_request.log import configure_logging

USER_AGENT = "mirror-request-live-check/0.1"

passed: list[str] = []
failed: list[tuple[str, str]] = []


def ok(name: str, result: ResponseResult) -> None:
    print(f"  PASS  {name}  -> {result.status_code}")
    passed.append(name)


def fail(name: str, reason: str) -> None:
    print(f"  FAIL  {name}  -> {reason}")
    failed.append((name, reason))


async def check(
    name: str,
    call: Callable[[], Awaitable[ResponseResult]],
    expect: Callable[[ResponseResult], bool],
) -> None:
    result = await call()
    if expect(result):
        ok(name, result)
    else:
        fail(name, f"status={result.status_code} text={result.text is not None} refused={result.redirect_refused}")


async def main() -> None:
    configure_logging()
    async with RequestEngine(user_agent=USER_AGENT) as engine:
        print("\n=== Plain requests ===")
        await check(
            "get_text",
            lambda: engine.get("https://raw.githubusercontent.com/python/cpython/main/README.rst"),
            lambda r: r.ok,
        )
        await check(
            "get_api_json",
            lambda: engine.get("https://api.github.com/repos/python/cpython"),
            lambda r: r.ok and '"full_name"' in (r.text or ""),
        )

        print("\n=== Failures ===")
        await check(
            "plain_http_refused",
            lambda: engine.get("http://example.com/"),
            lambda r: r.stream is None,
        )
        await check(
            "missing_page",
            lambda: engine.get("https://api.github.com/this/does/not/exist", RequestOptions(error_suppress=True)),
            lambda r: r.status_code == 404 and r.text is None,
        )
        await check(
            "missing_page_stubborn",
            lambda: engine.get("https://api.github.com/this/does/not/exist", RequestOptions(stubborn=True)),
            lambda r: r.status_code == 404 and r.text is not None,
        )
        await check(
            "retry_once",
            lambda: engine.get(
                "https://api.github.com/this/does/not/exist",
                RequestOptions(timer=SleepTimer.asyncio(1.0), retry=True),
            ),
            lambda r: r.status_code == 404,
        )

    print("\n" + "=" * 60)
    print(f"PASSED: {len(passed)}   FAILED: {len(failed)}")
    if failed:
        print("\nFailed checks:")
        for name, reason in failed:
            print(f"  - {name}: {reason}")
    print("=" * 60)

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    asyncio.run(main())
