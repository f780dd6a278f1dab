from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

import mirror_request.cli as cli
from mirror_request.engine import RequestEngine


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[httpx.Request]:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/missing":
            return httpx.Response(404, stream=httpx.ByteStream(b"Not Found"))
        return httpx.Response(200, stream=httpx.ByteStream(b"hello\n"))

    def engine_factory(**kwargs: Any) -> RequestEngine:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return RequestEngine(httpx_client=client, **kwargs)

    monkeypatch.setattr(cli, "RequestEngine", engine_factory)
    monkeypatch.setattr(cli, "configure_logging", lambda level=None: None)
    return requests


def test_get_prints_text(captured: list[httpx.Request], capsys: pytest.CaptureFixture[str]) -> None:
    assert cli._main(["get", "https://example.com/file.txt"]) == 0
    assert capsys.readouterr().out == "hello\n"
    assert captured[0].method == "GET"


def test_failed_request_exits_nonzero(captured: list[httpx.Request], capsys: pytest.CaptureFixture[str]) -> None:
    assert cli._main(["get", "https://example.com/missing"]) == 1
    assert capsys.readouterr().out == ""


def test_stubborn_prints_error_body(captured: list[httpx.Request], capsys: pytest.CaptureFixture[str]) -> None:
    assert cli._main(["--stubborn", "get", "https://example.com/missing"]) == 0
    assert capsys.readouterr().out == "Not Found"


def test_post_json_body_and_headers(captured: list[httpx.Request]) -> None:
    code = cli._main(
        [
            "-H",
            "User-Agent: mirror-cli",
            "-H",
            "authorization: token abc",
            "post",
            "https://example.com/api",
            "--json",
            '{"name": "repo"}',
        ]
    )
    assert code == 0
    request = captured[0]
    assert request.method == "POST"
    assert json.loads(request.content) == {"name": "repo"}
    assert request.headers["user-agent"] == "mirror-cli"
    assert request.headers["authorization"] == "token abc"


def test_put_raw_body(captured: list[httpx.Request]) -> None:
    assert cli._main(["put", "https://example.com/api", "--data", "plain"]) == 0
    assert captured[0].method == "PUT"
    assert captured[0].content == b"plain"


def test_retry_makes_second_attempt(captured: list[httpx.Request]) -> None:
    assert cli._main(["--retry", "0", "get", "https://example.com/missing"]) == 1
    assert len(captured) == 2


@pytest.mark.parametrize(
    "argv",
    [
        ["-H", "Cache-Control: none", "get", "https://example.com/"],
        ["-H", "no-separator", "get", "https://example.com/"],
        ["get", "https://example.com/", "--data", "x"],
        ["post", "https://example.com/", "--json", "{not json"],
        ["delete", "https://example.com/"],
    ],
)
def test_usage_errors(argv: list[str], captured: list[httpx.Request]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli._main(argv)
    assert excinfo.value.code == 2
    assert captured == []


def test_json_string_body_is_sent_as_json(captured: list[httpx.Request]) -> None:
    assert cli._main(["post", "https://example.com/api", "--json", '"abc"']) == 0
    assert captured[0].content == b'"abc"'
