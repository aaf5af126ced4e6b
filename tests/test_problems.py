"""Tests for the problems capability."""

from __future__ import annotations

import pytest

from dt_managed.capabilities.problems import ProblemsApi
from dt_managed.o11y.queries import ProblemQuery

PROBLEM = {
    "problemId": "6716446358410797219_1763287920000V2",
    "displayId": "P-25113",
    "title": "Failure rate increase",
    "status": "OPEN",
    "severityLevel": "ERROR",
    "impactLevel": "SERVICES",
    "startTime": 1763288686574,
    "endTime": -1,
}


@pytest.fixture
def api(fake_client) -> ProblemsApi:
    return ProblemsApi(fake_client)


class TestQueries:
    def test_defaults(self, api, fake_client) -> None:
        api.list_problems()
        assert fake_client.calls == [("/api/v2/problems", {"pageSize": 50})]

    def test_all_params(self, api, fake_client) -> None:
        api.list_problems(
            ProblemQuery(
                from_="now-2h",
                to="now",
                status="OPEN",
                impact_level="SERVICES",
                entity_selector="type(SERVICE)",
                page_size=10,
                sort="+status",
            )
        )
        assert fake_client.calls == [
            (
                "/api/v2/problems",
                {
                    "pageSize": 10,
                    "from": "now-2h",
                    "to": "now",
                    "status": "OPEN",
                    "impactLevel": "SERVICES",
                    "entitySelector": "type(SERVICE)",
                    "sort": "+status",
                },
            )
        ]

    def test_details_path(self, api, fake_client) -> None:
        api.get_problem_details("P-1")
        assert fake_client.calls == [("/api/v2/problems/P-1", None)]


class TestFormatList:
    def test_format_list(self, api) -> None:
        result = api.format_list({"totalCount": 3, "problems": [PROBLEM]})
        assert "Listing 1 of 3 problems." in result
        assert "Not showing all matching problems" in result
        assert "problemId: 6716446358410797219_1763287920000V2" in result
        assert "displayId: P-25113" in result
        assert "severityLevel: ERROR" in result
        assert result.count("severityLevel") == 1
        assert "impactLevel: SERVICES" in result
        assert "startTime: 2025-11-16 10:24:46" in result
        assert "endTime" not in result
        assert "Use sort" not in result

    def test_closed_problem_shows_end_time(self, api) -> None:
        problem = dict(PROBLEM, status="CLOSED", endTime=1763292286574)
        result = api.format_list({"problems": [problem]})
        assert "endTime: 2025-11-16 11:24:46" in result

    def test_sort_hint(self, api) -> None:
        result = api.format_list({"problems": [PROBLEM, PROBLEM]})
        assert "Listing 2 problems." in result
        assert 'Use sort (e.g. with "+status"' in result

    def test_sparse_and_empty(self, api) -> None:
        assert "problemId: None" in api.format_list({"problems": [{}]})
        result = api.format_list(None)
        assert "Listing 0 problems." in result
        assert "Verify that the filters" in result


class TestFormatDetails:
    def test_details(self, api) -> None:
        result = api.format_details(PROBLEM)
        assert "Problem details in the following json" in result
        assert '"displayId":"P-25113"' in result
        assert "affectedEntities" in result
