"""
Configuration management for dt-managed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urlsplit

_config: Optional["ConnectionConfig"] = None

TOKEN_VARS = (
    "DT_MANAGED_API_TOKEN",
    "DT_CLASSIC_API_TOKEN",
    "DT_API_TOKEN",
    "DT_PERSONAL_ACCESS_TOKEN",
)


class ConfigError(Exception):
    """Raised when the environment configuration is missing or invalid."""


def strip_slash(value: str) -> str:
    """Remove exactly one trailing slash."""
    return value[:-1] if value.endswith("/") else value


def _environment_id_from_url(url: str) -> str:
    parts = urlsplit(url)
    segments = [s for s in parts.path.split("/") if s]
    if "e" in segments:
        idx = segments.index("e")
        if idx + 1 < len(segments):
            return segments[idx + 1]
    return parts.hostname or url


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection settings for one platform environment."""

    environment_id: str
    api_url: str
    dashboard_url: str
    api_token: str

    # Logging
    log_level: str = "INFO"

    # Tracing
    tracing_enabled: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConnectionConfig":
        """
        Create configuration from environment variables.

        The managed form (``DT_MANAGED_ENVIRONMENT`` holding the full
        environment URL) takes precedence over the alternate form
        (``DT_ENVIRONMENT`` plus ``DT_API_ENDPOINT_URL``).

        Raises:
            ConfigError: If a required variable is missing
        """
        env = os.environ if environ is None else environ

        log_level = env.get("DT_LOG_LEVEL") or "INFO"
        tracing_enabled = env.get("DT_TRACING_ENABLED", "false").lower() == "true"

        managed_url = env.get("DT_MANAGED_ENVIRONMENT")
        environment_id = env.get("DT_ENVIRONMENT")

        if managed_url or not environment_id:
            if not managed_url:
                raise ConfigError("DT_MANAGED_ENVIRONMENT is required")
            api_token = env.get("DT_MANAGED_API_TOKEN")
            if not api_token:
                raise ConfigError("DT_MANAGED_API_TOKEN is required")

            url = strip_slash(managed_url)
            return cls(
                environment_id=_environment_id_from_url(url),
                api_url=url,
                dashboard_url=url,
                api_token=api_token,
                log_level=log_level,
                tracing_enabled=tracing_enabled,
            )

        base_api_url = env.get("DT_API_ENDPOINT_URL")
        if not base_api_url:
            raise ConfigError("DT_API_ENDPOINT_URL is required")

        api_token = next((env[name] for name in TOKEN_VARS if env.get(name)), None)
        if not api_token:
            raise ConfigError(f"One of {', '.join(TOKEN_VARS)} is required")

        environment_id = strip_slash(environment_id)
        base_api_url = strip_slash(base_api_url)
        base_dashboard_url = strip_slash(env.get("DT_DYNATRACE_URL") or base_api_url)

        return cls(
            environment_id=environment_id,
            api_url=f"{base_api_url}/e/{environment_id}",
            dashboard_url=f"{base_dashboard_url}/e/{environment_id}",
            api_token=api_token,
            log_level=log_level,
            tracing_enabled=tracing_enabled,
        )

    def masked_token(self) -> str:
        """Return the token with all but its prefix hidden."""
        if len(self.api_token) <= 8:
            return "*" * len(self.api_token)
        return self.api_token[:4] + "*" * (len(self.api_token) - 4)


def load_config(environ: Optional[Mapping[str, str]] = None) -> ConnectionConfig:
    """
    Read the connection configuration from the environment.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        A new ConnectionConfig

    Raises:
        ConfigError: If a required variable is missing
    """
    return ConnectionConfig.from_env(environ)


def get_config() -> ConnectionConfig:
    """Get the current configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached configuration."""
    global _config
    _config = None
