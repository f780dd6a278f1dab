from __future__ import annotations

import pytest

from mirror_request.exceptions import ProtocolError
from mirror_request.security import require_https, resolve_redirect


def test_absolute_https_redirect_is_followed_as_is() -> None:
    target = "https://codeload.github.com/owner/repo/zip/master"
    assert resolve_redirect("https://github.com/owner/repo", target) == target


def test_relative_redirect_stays_on_same_host() -> None:
    assert (
        resolve_redirect("https://api.example.com:8443/v1/items?page=2", "/v2/items")
        == "https://api.example.com/v2/items"
    )


@pytest.mark.parametrize(
    "location",
    [
        "http://evil.example/",
        "//evil.example/",
        "javascript:alert(1)",
        "https://localhost/",
        "https://evil.example",
        "https://user@evil.example/",
        "https://bad-host.example/",
        "ftp://files.example.com/",
        "relative/path",
        "/",
        "",
    ],
)
def test_untrusted_redirect_targets_are_refused(location: str) -> None:
    assert resolve_redirect("https://example.com/start", location) is None


def test_non_ascii_hostnames_are_refused() -> None:
    assert resolve_redirect("https://example.com/", "https://exämple.com/") is None


def test_require_https_returns_parsed_url() -> None:
    url = require_https("https://example.com/path?q=1")
    assert url.host == "example.com"
    assert url.path == "/path"


@pytest.mark.parametrize("link", ["http://example.com/", "ftp://example.com/", "example.com/path"])
def test_require_https_rejects_other_schemes(link: str) -> None:
    with pytest.raises(ProtocolError, match="Unknown protocol"):
        require_https(link)
