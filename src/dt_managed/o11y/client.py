"""
Authenticated client for the environment REST API.
"""

from __future__ import annotations

import logging
import platform
import sys
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from dt_managed import __version__
from dt_managed.config import ConnectionConfig, strip_slash
from dt_managed.o11y.proxy import ProxyDescriptor, resolve_proxy

logger = logging.getLogger(__name__)

CLUSTER_VERSION_PATH = "/api/v1/config/clusterversion"
FALLBACK_PROBE_PATH = "/api/v2/metrics"


def user_agent() -> str:
    """User agent in the form ``dt-managed/vX.Y.Z (platform-arch)``."""
    return f"dt-managed/v{__version__} ({sys.platform}-{platform.machine()})"


def _version_parts(version: str) -> list:
    parts = []
    for component in version.split("."):
        digits = ""
        for ch in component.strip():
            if not ch.isdigit():
                break
            digits += ch
        parts.append(int(digits) if digits else 0)
    return parts


class ManagedClient:
    """
    Client for the environment API.

    Issues authenticated GET requests with a fixed timeout, no redirects
    and the proxy resolved from the environment at construction.
    """

    MINIMUM_VERSION = "1.328.0"

    def __init__(
        self,
        base_url: str,
        api_token: str,
        dashboard_url: Optional[str] = None,
        timeout: float = 30.0,
        tracing_enabled: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Environment API URL, e.g. https://host/e/<environment-id>
            api_token: API token sent as ``Api-Token``
            dashboard_url: URL used in UI links (default: base_url)
            timeout: Request timeout in seconds
            tracing_enabled: Wrap requests in OpenTelemetry spans
            transport: Transport override, used in tests

        Raises:
            ConfigError: If the proxy environment is invalid
        """
        self.base_url = strip_slash(base_url)
        self.dashboard_url = strip_slash(dashboard_url or self.base_url)
        self.tracing_enabled = tracing_enabled
        self.proxy: Optional[ProxyDescriptor] = resolve_proxy()

        self.client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"Api-Token {api_token}",
                "Content-Type": "application/json",
                "Connection": "close",
                "User-Agent": user_agent(),
            },
            timeout=timeout,
            follow_redirects=False,
            trust_env=False,
            proxy=self._httpx_proxy(),
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: ConnectionConfig, **kwargs: Any) -> "ManagedClient":
        """Create a client for a loaded configuration."""
        return cls(
            config.api_url,
            config.api_token,
            dashboard_url=config.dashboard_url,
            tracing_enabled=config.tracing_enabled,
            **kwargs,
        )

    def _httpx_proxy(self) -> Optional[httpx.Proxy]:
        if self.proxy is None:
            return None
        auth = None
        if self.proxy.auth is not None:
            auth = (self.proxy.auth.username, self.proxy.auth.password)
        return httpx.Proxy(url=self.proxy.url, auth=auth)

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Issue a GET request and return the decoded JSON body.

        Args:
            path: API path, with or without a leading slash
            params: Query parameters

        Returns:
            Decoded response body

        Raises:
            httpx.HTTPStatusError: On any non-2xx response, redirects included
            httpx.TransportError: On network failure
        """
        url = path if path.startswith("/") else f"/{path}"

        if self.tracing_enabled:
            return self._get_with_telemetry(url, params)

        return self._send(url, params)

    def _send(self, url: str, params: Optional[Mapping[str, Any]]) -> Any:
        logger.debug(f"GET {url} params={dict(params or {})}")
        response = self.client.get(url, params=dict(params or {}))
        response.raise_for_status()
        return response.json()

    def _get_with_telemetry(self, url: str, params: Optional[Mapping[str, Any]]) -> Any:
        from opentelemetry import trace

        tracer = trace.get_tracer("dt-managed")

        with tracer.start_as_current_span(
            "dt_managed.get",
            attributes={"http.method": "GET", "url.path": url},
        ) as span:
            try:
                return self._send(url, params)
            except httpx.HTTPStatusError as e:
                span.set_attribute("http.status_code", e.response.status_code)
                raise

    def validate_connection(self) -> bool:
        """
        Check that the environment is reachable with the configured token.

        Managed clusters expose the cluster version endpoint; the metrics
        listing is tried when it is not available.

        Returns:
            True if either probe returned HTTP 200
        """
        try:
            response = self.client.get(CLUSTER_VERSION_PATH)
            response.raise_for_status()
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Failed calling {CLUSTER_VERSION_PATH}; falling back to {FALLBACK_PROBE_PATH}: {e}")

        try:
            response = self.client.get(FALLBACK_PROBE_PATH, params={"pageSize": 1})
            response.raise_for_status()
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Failed calling {FALLBACK_PROBE_PATH}: {e}")
            return False

    def get_cluster_version(self) -> Dict[str, Any]:
        """Get the cluster version, e.g. ``{"version": "1.330.12.20251201-120000"}``."""
        return self.get(CLUSTER_VERSION_PATH)

    def validate_minimum_version(self, version: Union[str, Mapping[str, Any]]) -> bool:
        """
        Check that a cluster version is at least MINIMUM_VERSION.

        Args:
            version: Version string or a cluster version response

        Returns:
            True if the version is equal to or newer than the minimum
        """
        if isinstance(version, Mapping):
            version = str(version.get("version") or "")

        current = _version_parts(version)
        minimum = _version_parts(self.MINIMUM_VERSION)

        for i in range(max(len(current), len(minimum))):
            a = current[i] if i < len(current) else 0
            b = minimum[i] if i < len(minimum) else 0
            if a > b:
                return True
            if a < b:
                return False

        return True

    def cleanup(self) -> None:
        """Release pooled connections. The client must not be used afterwards."""
        self.client.timeout = httpx.Timeout(0.001)
        self.client.close()

    def __enter__(self) -> "ManagedClient":
        return self

    def __exit__(self, *args) -> None:
        self.cleanup()
