"""
Proxy configuration from the environment.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import unquote, urlsplit

from dt_managed.config import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProxyAuth:
    """Credentials for an authenticating proxy."""

    username: str
    password: str


@dataclass(frozen=True)
class ProxyDescriptor:
    """A parsed HTTP(S) proxy."""

    host: str
    port: int
    protocol: str  # scheme with trailing colon, e.g. "http:"
    auth: Optional[ProxyAuth] = None

    @property
    def url(self) -> str:
        """Proxy URL without credentials."""
        return f"{self.protocol}//{self.host}:{self.port}"


def resolve_proxy(environ: Optional[Mapping[str, str]] = None) -> Optional[ProxyDescriptor]:
    """
    Resolve the proxy from ``HTTPS_PROXY``/``HTTP_PROXY``.

    Lower-case variants take precedence over upper-case ones. At most one of
    the secure and insecure variables may be set.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        ProxyDescriptor, or None when no proxy is configured

    Raises:
        ConfigError: If both variables are set or the value cannot be parsed
    """
    env = os.environ if environ is None else environ

    https_proxy = env.get("https_proxy") or env.get("HTTPS_PROXY")
    http_proxy = env.get("http_proxy") or env.get("HTTP_PROXY")

    if https_proxy and http_proxy:
        raise ConfigError("Cannot specify both HTTPS_PROXY and HTTP_PROXY, use only one.")

    if https_proxy:
        value, default_port = https_proxy, 443
    elif http_proxy:
        value, default_port = http_proxy, 80
    else:
        return None

    try:
        parts = urlsplit(value)
        if not parts.scheme or not parts.hostname:
            raise ValueError(f"not an absolute URL: {value!r}")
        port = parts.port or default_port
    except ValueError as e:
        logger.error(f"Failed to configure HTTP proxy: {e}")
        raise ConfigError("Failed to parse and configure http(s) proxy") from e

    logger.info(f"Configuring HTTP proxy: {parts.hostname}:{port}")

    auth = None
    if parts.username:
        auth = ProxyAuth(
            username=unquote(parts.username),
            password=unquote(parts.password or ""),
        )

    return ProxyDescriptor(
        host=parts.hostname,
        port=port,
        protocol=f"{parts.scheme}:",
        auth=auth,
    )
