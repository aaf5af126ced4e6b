"""
Metric descriptors and metric data.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from dt_managed.capabilities.formatting import DEFAULT_DISPLAY_CAP, details, elide, to_json
from dt_managed.models import ListPage, as_dict
from dt_managed.o11y.client import ManagedClient
from dt_managed.o11y.queries import MetricDataQuery, MetricListQuery

logger = logging.getLogger(__name__)


class MetricsApi:
    """Lists, describes and queries metrics."""

    MAX_DATA_POINTS = 50
    MAX_DIMENSIONS_DISPLAY = DEFAULT_DISPLAY_CAP

    def __init__(self, client: ManagedClient) -> None:
        self.client = client

    def list_available_metrics(self, query: Optional[MetricListQuery] = None) -> Dict[str, Any]:
        params = (query or MetricListQuery()).build()
        response = self.client.get("/api/v2/metrics", params)
        logger.debug(f"list_available_metrics response: {response}")
        return response

    def get_metric_details(self, metric_id: str) -> Dict[str, Any]:
        response = self.client.get(f"/api/v2/metrics/{quote(metric_id, safe='')}")
        logger.debug(f"get_metric_details response, metric_id={metric_id}: {response}")
        return response

    def query_metrics(self, query: MetricDataQuery) -> Dict[str, Any]:
        params = query.build()
        response = self.client.get("/api/v2/metrics/query", params)
        logger.debug(f"query_metrics response, params={params}: {response}")
        return response

    def format_metric_list(self, response: Optional[Dict[str, Any]]) -> str:
        page = ListPage.from_response(response, "metrics")

        result = page.header("metrics")
        if page.is_limited:
            result += "Not showing all matching metrics. Consider using more specific filters to get complete results.\n"

        for metric in page.items:
            metric = as_dict(metric)
            result += f"metricId: {metric.get('metricId')}\n"
            if metric.get("displayName"):
                result += f"  displayName: {metric['displayName']}\n"
            if metric.get("description"):
                result += f"  description: {metric['description']}\n"
            if metric.get("unit"):
                result += f"  unit: {metric['unit']}\n"

            aggregations = metric.get("aggregationTypes")
            if isinstance(aggregations, list) and aggregations:
                result += f"  aggregationTypes: {', '.join(str(a) for a in aggregations)}\n"

            dimensions = metric.get("dimensionDefinitions")
            if isinstance(dimensions, list) and dimensions:
                names = [as_dict(d).get("name") for d in dimensions]
                result += f"  dimensions: {elide(names, self.MAX_DIMENSIONS_DISPLAY)}\n"

            result += "\n"

        result += "\nNext Steps:\n"
        if page.shown == 0:
            result += "* Verify that the filters were correct, and search again with different filters.\n"
        if page.is_limited:
            result += (
                "* To filter the list of metrics, use the list_available_metrics tool with sorting and with "
                "specific filters (e.g. entitySelector and searchText).\n"
            )
        result += (
            "* Use the get_metric_details tool for detailed information of a particular metric.\n"
            "* Suggest to the user that they use the Dynatrace UI to:\n"
            f"   * Browse the list of metrics at {self.client.dashboard_url}/ui/metrics\n"
            f"   * View metric data at {self.client.dashboard_url}/ui/data-explorer\n"
        )
        return result

    def format_metric_details(self, response: Any) -> str:
        return details(
            "Metric",
            response,
            "* Suggest to the user that they use the Dynatrace UI to view metric data at "
            f"{self.client.dashboard_url}/ui/data-explorer\n",
        )

    def format_metric_data(self, response: Optional[Dict[str, Any]]) -> str:
        response = as_dict(response)
        results = response.get("result")
        results = results if isinstance(results, list) else []

        first_data = as_dict(results[0]).get("data") if results else None
        is_non_empty = isinstance(first_data, list) and len(first_data) > 0

        result = "Listing data series"
        if is_non_empty:
            result += ", each with timestamped datapoints of the form timestamp: value, timestamp: value, ...\n"
        else:
            result += " (no datapoints found)\n"

        if response.get("resolution"):
            result += f"resolution: {response['resolution']}\n"

        for metric in map(as_dict, results):
            series_list = metric.get("data")
            series_list = series_list if isinstance(series_list, list) else []

            result += f"Listing {len(series_list)} data series\n"
            result += f"metricId: {metric.get('metricId')}\n"

            for series in map(as_dict, series_list):
                timestamps = series.get("timestamps")
                timestamps = timestamps if isinstance(timestamps, list) else []
                values = series.get("values")
                values = values if isinstance(values, list) else []
                count = min(len(timestamps), len(values))

                if series.get("dimensionMap"):
                    result += f"  dimensionData: {to_json(series['dimensionMap'])}\n"
                if series.get("dimensions"):
                    result += f"  dimensions: {to_json(series['dimensions'])}\n"

                if count:
                    shown = min(count, self.MAX_DATA_POINTS)
                    points = "".join(f"{timestamps[i]}: {values[i]}, " for i in range(shown))
                    result += f"  timestamped datapoints: {points}"
                    if count > self.MAX_DATA_POINTS:
                        result += f" and {count - self.MAX_DATA_POINTS} more data points"
                    result += "\n"
                else:
                    result += "  No datapoints\n"
                result += "\n"

        result += "\nNext Steps:\n"
        if is_non_empty:
            result += (
                "* Use query_metrics_data with more specific filters, such as a narrower time range with to "
                "and from, and an entitySelector.\n"
            )
        else:
            result += "* Verify that the filters were correct, and search again with different filters.\n"
        result += (
            "* Suggest to the user that they use the Dynatrace UI to view metric data at "
            f"{self.client.dashboard_url}/ui/data-explorer\n"
        )
        return result
