"""
Capability clients for the environment API.

Each client wraps one API area:
- EntitiesApi: Monitored entities, entity types and relationships
- EventsApi: Events
- LogsApi: Log search
- MetricsApi: Metric descriptors and data
- ProblemsApi: Problems
- SecurityApi: Security problems
- SloApi: Service-level objectives
"""

from dt_managed.capabilities.entities import EntitiesApi
from dt_managed.capabilities.events import EventsApi
from dt_managed.capabilities.logs import LogsApi
from dt_managed.capabilities.metrics import MetricsApi
from dt_managed.capabilities.problems import ProblemsApi
from dt_managed.capabilities.security import SecurityApi
from dt_managed.capabilities.slo import SloApi

__all__ = [
    "EntitiesApi",
    "EventsApi",
    "LogsApi",
    "MetricsApi",
    "ProblemsApi",
    "SecurityApi",
    "SloApi",
]
