"""Tests for the command-line diagnostics."""

from __future__ import annotations

import json
import logging
from typing import Callable

import httpx
import pytest
from click.testing import CliRunner

from dt_managed.cli import main
from dt_managed.o11y.client import ManagedClient

ENV_URL = "https://managed.example.com/e/abc123"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def managed_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DT_ENVIRONMENT", "DT_API_ENDPOINT_URL", "DT_LOG_LEVEL", "DT_TRACING_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DT_MANAGED_ENVIRONMENT", ENV_URL + "/")
    monkeypatch.setenv("DT_MANAGED_API_TOKEN", "dt0c01.ABCDEFGHIJ")


def use_transport(monkeypatch: pytest.MonkeyPatch, handler: Callable[[httpx.Request], httpx.Response]) -> None:
    def from_config(config, **kwargs):
        return ManagedClient(config.api_url, config.api_token, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(ManagedClient, "from_config", from_config)


def healthy(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/api/v1/config/clusterversion"):
        return httpx.Response(200, json={"version": "1.330.12.20251201-120000"})
    return httpx.Response(200, json={"metrics": []})


class TestConfigCommand:
    def test_shows_config(self, runner, managed_env) -> None:
        result = runner.invoke(main, ["config"])
        assert result.exit_code == 0
        assert "Environment ID: abc123" in result.output
        assert f"API URL: {ENV_URL}\n" in result.output
        assert ("API Token: dt0c" + "*" * 13) in result.output
        assert "ABCDEFGHIJ" not in result.output
        assert "Tracing: Disabled" in result.output

    def test_config_error(self, runner, monkeypatch) -> None:
        for name in ("DT_MANAGED_ENVIRONMENT", "DT_ENVIRONMENT"):
            monkeypatch.delenv(name, raising=False)
        result = runner.invoke(main, ["config"])
        assert result.exit_code == 1
        assert "Configuration error: DT_MANAGED_ENVIRONMENT is required" in result.output


class TestStatusCommand:
    def test_text_output(self, runner, managed_env, monkeypatch) -> None:
        use_transport(monkeypatch, healthy)
        result = runner.invoke(main, ["status"])
        assert result.exit_code == 0
        assert f"Environment: {ENV_URL}" in result.output
        assert "Connection: ✓ OK" in result.output
        assert "Version: ✓ 1.330.12.20251201-120000 (minimum 1.328.0)" in result.output

    def test_json_output(self, runner, managed_env, monkeypatch) -> None:
        use_transport(monkeypatch, healthy)
        result = runner.invoke(main, ["status", "--output", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {
            "url": ENV_URL,
            "connected": True,
            "version": "1.330.12.20251201-120000",
            "supported": True,
            "minimum_version": "1.328.0",
        }

    def test_old_cluster(self, runner, managed_env, monkeypatch) -> None:
        use_transport(monkeypatch, lambda request: httpx.Response(200, json={"version": "1.300.0"}))
        result = runner.invoke(main, ["status"])
        assert result.exit_code == 0
        assert "Version: ✗ 1.300.0" in result.output

    def test_unreachable(self, runner, managed_env, monkeypatch) -> None:
        use_transport(monkeypatch, lambda request: httpx.Response(401, json={"error": "unauthorized"}))
        result = runner.invoke(main, ["status"])
        assert result.exit_code == 1
        assert "Connection: ✗ Failed" in result.output
        assert "Version: ○ Not available" in result.output

    def test_version_lookup_failure(self, runner, managed_env, monkeypatch, caplog) -> None:
        calls: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            if len(calls) == 1:
                return httpx.Response(200, json={"version": "1.330.0"})
            return httpx.Response(500, json={"error": "boom"})

        use_transport(monkeypatch, handler)
        caplog.set_level(logging.DEBUG, logger="dt_managed.cli")
        result = runner.invoke(main, ["status"])
        assert result.exit_code == 0
        assert "Connection: ✓ OK" in result.output
        assert "Version: ○ Not available" in result.output
        assert any(
            r.name == "dt_managed.cli" and "Cluster version unavailable" in r.getMessage() for r in caplog.records
        )
