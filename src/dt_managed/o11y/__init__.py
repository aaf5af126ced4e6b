"""
Authenticated access to the environment API.

Proxy resolution, the HTTP client and typed query records.
"""

from dt_managed.o11y.client import ManagedClient
from dt_managed.o11y.proxy import ProxyAuth, ProxyDescriptor, resolve_proxy
from dt_managed.o11y.queries import (
    EntityQuery,
    EventQuery,
    LogQuery,
    MetricDataQuery,
    MetricListQuery,
    ProblemQuery,
    SecurityProblemQuery,
    SloDetailsQuery,
    SloQuery,
)

__all__ = [
    "ManagedClient",
    "ProxyAuth",
    "ProxyDescriptor",
    "resolve_proxy",
    "EntityQuery",
    "EventQuery",
    "LogQuery",
    "MetricDataQuery",
    "MetricListQuery",
    "ProblemQuery",
    "SecurityProblemQuery",
    "SloDetailsQuery",
    "SloQuery",
]
