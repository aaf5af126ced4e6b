"""
Log search.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from dt_managed.capabilities.formatting import format_timestamp
from dt_managed.models import ListPage, as_dict
from dt_managed.o11y.client import ManagedClient
from dt_managed.o11y.queries import LogQuery

logger = logging.getLogger(__name__)


def log_level(record: Dict[str, Any]) -> str:
    """Best-effort level of a log record."""
    columns = as_dict(record.get("additionalColumns"))
    levels = columns.get("loglevel")
    if isinstance(levels, list) and levels and levels[0]:
        return str(levels[0])
    return record.get("status") or record.get("log_level") or "NONE"


class LogsApi:
    """Searches and formats log records."""

    MAX_METADATA_DISPLAY = 8

    def __init__(self, client: ManagedClient) -> None:
        self.client = client

    def query_logs(self, query: LogQuery) -> Dict[str, Any]:
        params = query.build()
        response = self.client.get("/api/v2/logs/search", params)
        logger.debug(f"query_logs response: {response}")
        return response

    def format_list(self, response: Optional[Dict[str, Any]]) -> str:
        # Log search pages by slice, so there is no total count to report
        page = ListPage.from_response(response, "results")
        is_limited = bool(as_dict(response).get("nextSliceKey"))

        result = f"Listing {page.shown} log records.\n"
        if is_limited:
            result += "Results likely restricted due to maximum response size, consider using a more specific filter.\n"

        for record in page.items:
            record = as_dict(record)
            result += f"**{format_timestamp(record.get('timestamp'))}** [{log_level(record)}]\n"
            result += f"{record.get('content')}\n"

            if record.get("eventType"):
                result += f"Event Type: {record['eventType']}\n"

            metadata = [
                f"{key}: {value[0]}"
                for key, value in as_dict(record.get("additionalColumns")).items()
                if isinstance(value, list) and value
            ]
            if metadata:
                result += f"_{', '.join(metadata[: self.MAX_METADATA_DISPLAY])}_\n"
                if len(metadata) > self.MAX_METADATA_DISPLAY:
                    result += f"_... and {len(metadata) - self.MAX_METADATA_DISPLAY} more metadata fields_\n"

            result += "\n"

        result += "\nNext Steps:\n"
        if page.shown == 0:
            result += "* Try broader search terms or expand the time range.\n"
        if is_limited:
            result += "* Use more restrictive filters, such as a narrower time range or more specific search terms.\n"
        if page.shown > 1:
            result += '* Use sort (e.g. with "-timestamp" for newest logs first).\n'
        result += (
            "* Suggest to the user that they use the Dynatrace UI to view log data at "
            f"{self.client.dashboard_url}/ui/log-monitoring\n"
            "* Use list_problems to see what problems Dynatrace knows of, if not already done so.\n"
        )
        return result
