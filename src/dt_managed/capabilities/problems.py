"""
Problems detected by the platform.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from dt_managed.capabilities.formatting import details, format_timestamp
from dt_managed.models import ListPage, as_dict
from dt_managed.o11y.client import ManagedClient
from dt_managed.o11y.queries import ProblemQuery

logger = logging.getLogger(__name__)


class ProblemsApi:
    """Lists and formats problems."""

    def __init__(self, client: ManagedClient) -> None:
        self.client = client

    def list_problems(self, query: Optional[ProblemQuery] = None) -> Dict[str, Any]:
        params = (query or ProblemQuery()).build()
        response = self.client.get("/api/v2/problems", params)
        logger.debug(f"list_problems response: {response}")
        return response

    def get_problem_details(self, problem_id: str) -> Dict[str, Any]:
        response = self.client.get(f"/api/v2/problems/{quote(problem_id, safe='')}")
        logger.debug(f"get_problem_details response: {response}")
        return response

    def format_list(self, response: Optional[Dict[str, Any]]) -> str:
        page = ListPage.from_response(response, "problems")

        result = page.header("problems")
        if page.is_limited:
            result += (
                "Not showing all matching problems. Consider using more specific filters "
                "(status, impactLevel, entitySelector) to get complete results.\n"
            )

        for problem in page.items:
            problem = as_dict(problem)
            result += f"problemId: {problem.get('problemId')}\n"
            result += f"  displayId: {problem.get('displayId')}\n"
            result += f"  title: {problem.get('title')}\n"
            result += f"  status: {problem.get('status')}\n"
            result += f"  severityLevel: {problem.get('severityLevel')}\n"
            result += f"  impactLevel: {problem.get('impactLevel')}\n"
            if problem.get("startTime"):
                result += f"  startTime: {format_timestamp(problem['startTime'])}\n"
            end_time = problem.get("endTime")
            if end_time and end_time != -1:
                result += f"  endTime: {format_timestamp(end_time)}\n"
            result += "\n"

        result += "\nNext Steps:\n"
        if page.shown == 0:
            result += (
                "* Verify that the filters such as entitySelector and time range were correct, and search "
                "again with different filters.\n"
            )
        if page.is_limited:
            result += "* Use more restrictive filters, such as a more specific entitySelector.\n"
        if page.shown > 1:
            result += '* Use sort (e.g. with "+status" for open problems first).\n'
        result += (
            f"* Suggest to the user that they view the problems in the Dynatrace UI at {self.client.dashboard_url}/ui/problems\n"
            "* If the user is interested in a specific problem, use the get_problem_details tool. "
            "Use the problemId (UUID) for detailed analysis.\n"
        )
        return result

    def format_details(self, response: Any) -> str:
        return details(
            "Problem",
            response,
            "* If the affectedEntities is not empty, suggest to the user that they could investigate those "
            "entities further.\n",
        )
