"""
Events raised on monitored entities.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from dt_managed.capabilities.formatting import (
    DEFAULT_DISPLAY_CAP,
    details,
    elide,
    format_timestamp,
    zone_names,
)
from dt_managed.models import ListPage, as_dict
from dt_managed.o11y.client import ManagedClient
from dt_managed.o11y.queries import EventQuery

logger = logging.getLogger(__name__)


def _has_time(value: Any) -> bool:
    return bool(value) and value != -1


class EventsApi:
    """Queries and formats events."""

    MAX_PROPERTIES_DISPLAY = DEFAULT_DISPLAY_CAP
    MAX_MANAGEMENT_ZONES_DISPLAY = DEFAULT_DISPLAY_CAP

    def __init__(self, client: ManagedClient) -> None:
        self.client = client

    def query_events(self, query: EventQuery) -> Dict[str, Any]:
        params = query.build()
        response = self.client.get("/api/v2/events", params)
        logger.debug(f"query_events response: {response}")
        return response

    def get_event_details(self, event_id: str) -> Dict[str, Any]:
        response = self.client.get(f"/api/v2/events/{quote(event_id, safe='')}")
        logger.debug(f"get_event_details response: {response}")
        return response

    def format_list(self, response: Optional[Dict[str, Any]]) -> str:
        page = ListPage.from_response(response, "events")

        result = page.header("events")
        if page.is_limited:
            result += (
                "Not showing all matching events. Consider using more specific filters "
                "(eventType, entitySelector) to get complete results.\n"
            )

        for event in page.items:
            event = as_dict(event)
            result += f"eventId: {event.get('eventId')}\n"
            result += f"  eventType: {event.get('eventType')}\n"
            result += f"  status: {event.get('status')}\n"
            result += f"  title: {event.get('title')}\n"
            if event.get("description"):
                result += f"  description: {event['description']}\n"
            if _has_time(event.get("startTime")):
                result += f"  startTime: {format_timestamp(event['startTime'])}\n"
            if _has_time(event.get("endTime")):
                result += f"  endTime: {format_timestamp(event['endTime'])}\n"
            if event.get("severityLevel"):
                result += f"  severityLevel: {event['severityLevel']}\n"
            if event.get("impactLevel"):
                result += f"  impactLevel: {event['impactLevel']}\n"

            properties = event.get("properties")
            if isinstance(properties, dict) and properties:
                props = [f"{k}={v}" for k, v in properties.items()]
                result += f"  properties: {elide(props, self.MAX_PROPERTIES_DISPLAY)}\n"

            zones = event.get("managementZones")
            if isinstance(zones, list) and zones:
                result += f"  Management Zones: {elide(zone_names(zones), self.MAX_MANAGEMENT_ZONES_DISPLAY)}\n"

            result += "\n"

        result += "\nNext Steps:\n"
        if page.shown == 0:
            result += (
                "* Try broader search terms or expand the time range; if using an entitySelector, check with "
                "discover_entities which entities it matches.\n"
            )
        if page.is_limited:
            result += "* Use more restrictive filters, such as a narrower time range or more specific search terms.\n"
        if page.shown > 0:
            result += "* If the user is interested in a specific event, use the get_event_details tool. Use the eventId for this.\n"
        result += (
            "* Suggest to the user that they use the Dynatrace UI to view events at "
            f"{self.client.dashboard_url}/ by navigating to the relevant entity.\n"
            "* Use list_problems to see what problems Dynatrace knows of, if not already done so.\n"
        )
        return result

    def format_details(self, response: Any) -> str:
        return details(
            "Event",
            response,
            "* Suggest to the user that they explore this further in the Dynatrace UI at "
            f"{self.client.dashboard_url}/\n"
            "* Use list_problems to see what problems Dynatrace knows of, if not already done so.\n",
        )
