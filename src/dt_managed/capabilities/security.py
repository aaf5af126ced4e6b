"""
Security problems (vulnerabilities).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from dt_managed.capabilities.formatting import DEFAULT_DISPLAY_CAP, details, elide, format_timestamp
from dt_managed.models import ListPage, as_dict
from dt_managed.o11y.client import ManagedClient
from dt_managed.o11y.queries import SecurityProblemQuery

logger = logging.getLogger(__name__)


class SecurityApi:
    """Lists and formats security problems."""

    MAX_CVES_DISPLAY = DEFAULT_DISPLAY_CAP

    def __init__(self, client: ManagedClient) -> None:
        self.client = client

    def list_security_problems(self, query: Optional[SecurityProblemQuery] = None) -> Dict[str, Any]:
        params = (query or SecurityProblemQuery()).build()
        response = self.client.get("/api/v2/securityProblems", params)
        logger.debug(f"list_security_problems response: {response}")
        return response

    def get_security_problem_details(self, security_problem_id: str) -> Dict[str, Any]:
        response = self.client.get(f"/api/v2/securityProblems/{quote(security_problem_id, safe='')}")
        logger.debug(f"get_security_problem_details response: {response}")
        return response

    def format_list(self, response: Optional[Dict[str, Any]]) -> str:
        page = ListPage.from_response(response, "securityProblems")

        result = page.header("security vulnerabilities")
        if page.is_limited:
            result += (
                "Not showing all matching vulnerabilities. Consider using more specific filters "
                "(status, riskLevel, entitySelector) to get complete results.\n"
            )

        for problem in page.items:
            problem = as_dict(problem)
            result += f"securityProblemId: {problem.get('securityProblemId')}\n"
            result += f"  displayId: {problem.get('displayId')}\n"
            result += f"  title: {problem.get('title')}\n"
            result += f"  status: {problem.get('status')}\n"
            result += f"  vulnerabilityType: {problem.get('vulnerabilityType')}\n"
            result += f"  technology: {problem.get('technology')}\n"

            risk = problem.get("riskAssessment")
            if isinstance(risk, dict):
                result += (
                    f"  riskLevel: {risk.get('riskLevel')}; "
                    f"riskScore: {risk.get('riskScore')}; "
                    f"exposure: {risk.get('exposure')}\n"
                )

            cves = problem.get("cveIds")
            if isinstance(cves, list) and cves:
                result += f"  cveIds: {elide(cves, self.MAX_CVES_DISPLAY)}\n"

            if problem.get("firstSeenTimestamp"):
                result += f"  firstSeen: {format_timestamp(problem['firstSeenTimestamp'])}\n"
            result += "\n"

        result += "\nNext Steps:\n"
        if page.shown == 0:
            result += (
                "* Verify that the filters such as entitySelector, status and time range were correct, and "
                "search again with different filters.\n"
            )
        if page.is_limited:
            result += "* Use more restrictive filters, such as a more specific entitySelector and status.\n"
        if page.shown > 1:
            result += '* Use sort (e.g. with "-riskAssessment.riskScore" for highest risk score first).\n'
        result += (
            "* If the user is interested in a specific vulnerability, use the get_security_problem_details tool. "
            "Use the securityProblemId for this.\n"
            "* Suggest to the user that they view the security vulnerabilities in the Dynatrace UI at "
            f"{self.client.dashboard_url}/ui/security/overview for an overview, "
            f"or {self.client.dashboard_url}/ui/security/vulnerabilities for a list of third-party vulnerabilities\n"
        )
        return result

    def format_details(self, response: Any) -> str:
        return details(
            "Security problem",
            response,
            "* If there are affectedEntities, suggest to the user that they could get further information about "
            "those entities with the get_entity_details tool, using the entityId.\n"
            "* Suggest to the user that they view the security vulnerability in the Dynatrace UI at "
            f"{self.client.dashboard_url}/ui/security/vulnerabilities/<securityProblemId>, "
            "using the securityProblemId in the URL.\n",
        )
