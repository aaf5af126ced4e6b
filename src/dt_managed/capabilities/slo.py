"""
Service-level objectives.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from dt_managed.capabilities.formatting import DEFAULT_DISPLAY_CAP, details, elide, zone_names
from dt_managed.models import ListPage, as_dict
from dt_managed.o11y.client import ManagedClient
from dt_managed.o11y.queries import SloDetailsQuery, SloQuery

logger = logging.getLogger(__name__)


def _has_percentage(value: Any) -> bool:
    return value is not None and value != -1


class SloApi:
    """Lists and formats SLOs."""

    MAX_MANAGEMENT_ZONES_DISPLAY = DEFAULT_DISPLAY_CAP

    def __init__(self, client: ManagedClient) -> None:
        self.client = client

    def list_slos(self, query: Optional[SloQuery] = None) -> Dict[str, Any]:
        params = (query or SloQuery()).build()
        response = self.client.get("/api/v2/slo", params)
        logger.debug(f"list_slos response: {response}")
        return response

    def get_slo_details(self, query: SloDetailsQuery) -> Dict[str, Any]:
        params = query.build()
        response = self.client.get(f"/api/v2/slo/{quote(query.id, safe='')}", params)
        logger.debug(f"get_slo_details response: {response}")
        return response

    def format_list(self, response: Optional[Dict[str, Any]]) -> str:
        page = ListPage.from_response(response, "slo")

        result = page.header("SLOs")
        if page.is_limited:
            result += "Not showing all matching SLOs. Consider using more specific filters (sloSelector) to get complete results.\n"

        for slo in page.items:
            slo = as_dict(slo)
            result += f"id: {slo.get('id')}\n"
            result += f"  name: {slo.get('name')}\n"
            if slo.get("description"):
                result += f"  description: {slo['description']}\n"
            result += f"  status: {slo.get('status')}\n"
            result += f"  target: {slo.get('target')}\n"
            result += f"  warning: {slo.get('warning')}\n"
            result += f"  enabled: {slo.get('enabled')}\n"
            if slo.get("timeframe"):
                result += f"  timeframe: {slo['timeframe']}\n"
            if _has_percentage(slo.get("evaluatedPercentage")):
                result += f"  evaluatedPercentage: {slo['evaluatedPercentage']}%\n"
            if _has_percentage(slo.get("errorBudget")):
                result += f"  error budget: {slo['errorBudget']}%\n"

            zones = slo.get("managementZones")
            if isinstance(zones, list) and zones:
                result += f"  management zones: {elide(zone_names(zones), self.MAX_MANAGEMENT_ZONES_DISPLAY)}\n"
            result += "\n"

        result += "\nNext Steps:\n"
        if page.shown == 0:
            result += "* Verify that the filters such as sloSelector were correct, and search again with different filters.\n"
        if page.is_limited:
            result += "* Use more restrictive filters, such as a more specific sloSelector and status.\n"
        if page.shown > 1:
            result += '* Use sort (e.g. with "+name" for ascending alphabetical order).\n'
        result += (
            "* If the user is interested in a specific SLO, use the get_slo_details tool. Use the SLO id for this.\n"
            f"* Suggest to the user that they view the SLOs in the Dynatrace UI at {self.client.dashboard_url}/ui/slo\n"
        )
        return result

    def format_details(self, response: Any) -> str:
        return details(
            "SLO",
            response,
            "* Suggest to the user that they view the SLO in the Dynatrace UI at "
            f"{self.client.dashboard_url}/ui/slo/<id>, using the SLO id in the URL.\n",
        )
