"""
Query parameter records for the environment API.

Each record's ``build()`` returns the query-string mapping for one request.
Optional fields are only included when set; the API treats an omitted key
differently from an empty one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

ENTITIES_PAGE_SIZE = 100
ENTITY_TYPES_PAGE_SIZE = 500
EVENTS_PAGE_SIZE = 100
LOGS_DEFAULT_LIMIT = 100
LOGS_MAX_LIMIT = 1000
METRICS_PAGE_SIZE = 500
PROBLEMS_PAGE_SIZE = 50
SECURITY_PROBLEMS_PAGE_SIZE = 200
SLO_PAGE_SIZE = 200


def _with_optional(params: Dict[str, Any], **optional: Any) -> Dict[str, Any]:
    """Add each optional value that is set."""
    for key, value in optional.items():
        if value:
            params[key] = value
    return params


@dataclass
class EntityQuery:
    """Query for /api/v2/entities."""

    entity_selector: str
    page_size: Optional[int] = None
    mz_selector: Optional[str] = None
    from_: Optional[str] = None
    to: Optional[str] = None
    sort: Optional[str] = None

    def build(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "pageSize": self.page_size or ENTITIES_PAGE_SIZE,
            "entitySelector": self.entity_selector,
        }
        return _with_optional(
            params,
            mzSelector=self.mz_selector,
            **{"from": self.from_},
            to=self.to,
            sort=self.sort,
        )


@dataclass
class EventQuery:
    """Query for /api/v2/events."""

    from_: str
    to: str
    event_type: Optional[str] = None
    entity_selector: Optional[str] = None
    page_size: Optional[int] = None

    def build(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "from": self.from_,
            "to": self.to,
            "pageSize": self.page_size or EVENTS_PAGE_SIZE,
        }
        return _with_optional(
            params,
            eventType=self.event_type,
            entitySelector=self.entity_selector,
        )


@dataclass
class LogQuery:
    """Query for /api/v2/logs/search."""

    from_: str
    to: str
    query: str = ""
    limit: Optional[int] = None
    sort: Optional[str] = None

    def build(self) -> Dict[str, Any]:
        return {
            "query": self.query or "",
            "from": self.from_,
            "to": self.to,
            "limit": min(self.limit or LOGS_DEFAULT_LIMIT, LOGS_MAX_LIMIT),
            "sort": self.sort or "-timestamp",
        }


@dataclass
class MetricListQuery:
    """Query for /api/v2/metrics."""

    entity_selector: Optional[str] = None
    metadata_selector: Optional[str] = None
    text: Optional[str] = None
    fields: Optional[str] = None
    page_size: Optional[int] = None
    next_page_key: Optional[str] = None
    written_since: Optional[str] = None

    def build(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"pageSize": self.page_size or METRICS_PAGE_SIZE}
        return _with_optional(
            params,
            entitySelector=self.entity_selector,
            metadataSelector=self.metadata_selector,
            text=self.text,
            fields=self.fields,
            writtenSince=self.written_since,
            nextPageKey=self.next_page_key,
        )


@dataclass
class MetricDataQuery:
    """Query for /api/v2/metrics/query."""

    metric_selector: str
    from_: str
    to: str
    resolution: Optional[str] = None
    entity_selector: Optional[str] = None

    def build(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "metricSelector": self.metric_selector,
            "resolution": self.resolution or "Inf",
            "from": self.from_,
            "to": self.to,
        }
        return _with_optional(params, entitySelector=self.entity_selector)


@dataclass
class ProblemQuery:
    """Query for /api/v2/problems."""

    from_: Optional[str] = None
    to: Optional[str] = None
    status: Optional[str] = None
    impact_level: Optional[str] = None
    entity_selector: Optional[str] = None
    page_size: Optional[int] = None
    sort: Optional[str] = None

    def build(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"pageSize": self.page_size or PROBLEMS_PAGE_SIZE}
        return _with_optional(
            params,
            **{"from": self.from_},
            to=self.to,
            status=self.status,
            impactLevel=self.impact_level,
            entitySelector=self.entity_selector,
            sort=self.sort,
        )


@dataclass
class SecurityProblemQuery:
    """Query for /api/v2/securityProblems."""

    risk_level: Optional[str] = None  # LOW, MEDIUM, HIGH, CRITICAL
    status: Optional[str] = None  # OPEN, RESOLVED
    entity_selector: Optional[str] = None
    from_: Optional[str] = None
    to: Optional[str] = None
    page_size: Optional[int] = None
    sort: Optional[str] = None

    def build(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"pageSize": self.page_size or SECURITY_PROBLEMS_PAGE_SIZE}
        return _with_optional(
            params,
            riskLevel=self.risk_level,
            securityProblemSelector=f'status("{self.status}")' if self.status else None,
            entitySelector=self.entity_selector,
            **{"from": self.from_},
            to=self.to,
            sort=self.sort,
        )


@dataclass
class SloQuery:
    """Query for /api/v2/slo."""

    slo_selector: Optional[str] = None
    time_frame: Optional[str] = None
    from_: Optional[str] = None
    to: Optional[str] = None
    demo: bool = False
    page_size: Optional[int] = None
    evaluate: bool = False
    sort: Optional[str] = None
    enabled_slos: Optional[str] = None
    show_global_slos: bool = False

    def build(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"pageSize": self.page_size or SLO_PAGE_SIZE}
        return _with_optional(
            params,
            sloSelector=self.slo_selector,
            timeFrame=self.time_frame,
            **{"from": self.from_},
            to=self.to,
            demo=self.demo,
            evaluate=self.evaluate,
            enabledSlos=self.enabled_slos,
            showGlobalSlos=self.show_global_slos,
            sort=self.sort,
        )


@dataclass
class SloDetailsQuery:
    """Query for /api/v2/slo/{id}."""

    id: str
    from_: Optional[str] = None
    to: Optional[str] = None
    time_frame: Optional[str] = None

    def build(self) -> Dict[str, Any]:
        params = _with_optional(
            {},
            **{"from": self.from_},
            to=self.to,
            timeFrame=self.time_frame,
        )
        # An explicit range needs the "given time frame" mode
        if not self.time_frame and (self.from_ or self.to):
            params["timeFrame"] = "GTF"
        return params
