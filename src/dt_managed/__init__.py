"""
dt-managed - Typed client for a managed observability environment's REST API.

Covers entities, events, logs, metrics, problems, security problems and SLOs,
with text formatters that turn each response into a readable summary.
"""

__version__ = "0.1.0"

from dt_managed.config import ConfigError, ConnectionConfig, get_config, load_config
from dt_managed.o11y import ManagedClient
from dt_managed.capabilities import (
    EntitiesApi,
    EventsApi,
    LogsApi,
    MetricsApi,
    ProblemsApi,
    SecurityApi,
    SloApi,
)

__all__ = [
    # Config
    "ConfigError",
    "ConnectionConfig",
    "get_config",
    "load_config",
    # Client
    "ManagedClient",
    # Capabilities
    "EntitiesApi",
    "EventsApi",
    "LogsApi",
    "MetricsApi",
    "ProblemsApi",
    "SecurityApi",
    "SloApi",
    # Version
    "__version__",
]
