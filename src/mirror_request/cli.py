"""Command-line entry point for one-off requests."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Sequence

from .engine import RequestEngine
from .log import configure_logging
from .models import CustomizableHeader
from .request_options import JsonPayload, RequestOptions, SleepTimer


def _parse_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME:VALUE, got '{raw}'")
    try:
        header = CustomizableHeader(name.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"header '{name.strip()}' cannot be customized") from None
    return header.value, value.strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mirror-request")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at debug level")
    parser.add_argument("--stubborn", action="store_true", help="decode non-2xx bodies too")
    parser.add_argument("--quiet-errors", action="store_true", help="log failures at debug level")
    parser.add_argument("--retry", type=float, metavar="SECONDS", help="retry once after a delay")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        type=_parse_header,
        help="override Accept, Authorization or User-Agent",
    )
    parser.add_argument("method", choices=["get", "post", "put"])
    parser.add_argument("url")
    body = parser.add_mutually_exclusive_group()
    body.add_argument("--data", help="raw request body")
    body.add_argument("--json", dest="json_body", help="JSON request body")
    return parser


def _payload(args: argparse.Namespace) -> Any:
    if args.json_body is not None:
        return JsonPayload(json.loads(args.json_body))
    return args.data if args.data is not None else ""


async def _run(args: argparse.Namespace) -> int:
    timer = SleepTimer.asyncio(args.retry) if args.retry is not None else None
    options = RequestOptions(
        timer=timer,
        error_suppress=args.quiet_errors,
        stubborn=args.stubborn,
        retry=timer is not None,
    )
    async with RequestEngine(headers=dict(args.header)) as engine:
        if args.method == "get":
            result = await engine.get(args.url, options)
        elif args.method == "post":
            result = await engine.post(args.url, _payload(args), options)
        else:
            result = await engine.put(args.url, _payload(args), options)

    if result.text is None:
        return 1
    sys.stdout.write(result.text)
    return 0


def _main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.method == "get" and (args.data is not None or args.json_body is not None):
        parser.error("get does not take a request body")
    if args.json_body is not None:
        try:
            json.loads(args.json_body)
        except ValueError as exc:
            parser.error(f"--json is not valid JSON: {exc}")
    configure_logging("DEBUG" if args.verbose else None)
    return asyncio.run(_run(args))


def main() -> None:
    raise SystemExit(_main())
