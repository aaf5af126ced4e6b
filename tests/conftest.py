"""Pytest configuration and fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from dt_managed.config import reset_config

PROXY_VARS = ("http_proxy", "HTTP_PROXY", "https_proxy", "HTTPS_PROXY")


@dataclass
class FakeClient:
    """Records get() calls and returns a canned response."""

    response: Any = field(default_factory=dict)
    dashboard_url: str = "https://managed.example.com/e/abc123"
    calls: list[tuple[str, Any]] = field(default_factory=list)
    error: Exception | None = None

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        self.calls.append((path, params))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """No proxy or cached configuration leaks in from the host."""
    for name in PROXY_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()
