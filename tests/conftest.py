from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MIRROR_REQUEST_USER_AGENT", "MIRROR_REQUEST_TOKEN", "MIRROR_REQUEST_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
