"""Tests for the events capability."""

from __future__ import annotations

import pytest

from dt_managed.capabilities.events import EventsApi
from dt_managed.o11y.queries import EventQuery

EVENT = {
    "eventId": "-2899693953000578799_1763288686574",
    "eventType": "MONITORING_UNAVAILABLE",
    "title": "Monitoring not available",
    "status": "OPEN",
    "startTime": 1763288686574,
    "endTime": -1,
    "properties": {"dt.event.is_rootcause_relevant": "true"},
    "managementZones": [{"id": "42", "name": "Shop"}],
}


@pytest.fixture
def api(fake_client) -> EventsApi:
    return EventsApi(fake_client)


class TestQueries:
    def test_all_params(self, api, fake_client) -> None:
        api.query_events(
            EventQuery(from_="now-1h", to="now", event_type="CUSTOM_INFO", entity_selector="type(SERVICE)", page_size=50)
        )
        assert fake_client.calls == [
            (
                "/api/v2/events",
                {
                    "from": "now-1h",
                    "to": "now",
                    "pageSize": 50,
                    "eventType": "CUSTOM_INFO",
                    "entitySelector": "type(SERVICE)",
                },
            )
        ]

    def test_defaults(self, api, fake_client) -> None:
        api.query_events(EventQuery(from_="now-1h", to="now"))
        assert fake_client.calls == [("/api/v2/events", {"from": "now-1h", "to": "now", "pageSize": 100})]

    def test_get_event_details(self, api, fake_client) -> None:
        fake_client.response = {"eventId": "event-123"}
        assert api.get_event_details("event-123") == {"eventId": "event-123"}
        assert fake_client.calls == [("/api/v2/events/event-123", None)]


class TestFormatList:
    def test_format_list(self, api) -> None:
        result = api.format_list({"totalCount": 386, "events": [EVENT]})
        assert "Listing 1 of 386 events." in result
        assert "Not showing all matching events" in result
        assert "eventId: -2899693953000578799_1763288686574" in result
        assert "status: OPEN" in result
        assert "title: Monitoring not available" in result
        assert "startTime: 2025-11-16 10:24:46" in result
        assert "endTime:" not in result
        assert "properties: dt.event.is_rootcause_relevant=true" in result
        assert "Management Zones: Shop" in result

    def test_shows_all_retrieved_events(self, api) -> None:
        events = [
            {"eventId": f"event-{i}", "eventType": "CUSTOM_INFO", "title": f"Event {i}", "startTime": 1640995200000 + i}
            for i in range(75)
        ]
        result = api.format_list({"totalCount": 100, "events": events})
        assert "Listing 75 of 100 events" in result
        assert "title: Event 0\n" in result
        assert "title: Event 74\n" in result

    def test_not_limited_when_all_shown(self, api) -> None:
        result = api.format_list({"totalCount": 1, "events": [EVENT]})
        assert "Listing 1 of 1 events." in result
        assert "Not showing all" not in result

    def test_sparse_event(self, api) -> None:
        result = api.format_list({"events": [{}]})
        assert "Listing 1 events." in result
        assert "eventId: None" in result
        assert "eventType: None" in result
        assert "status: None" in result
        assert "title: None" in result
        assert "startTime" not in result
        assert "endTime" not in result

    def test_empty(self, api) -> None:
        assert "Listing 0 events." in api.format_list({})
        result = api.format_list({"totalCount": 0, "events": []})
        assert "Listing 0 events." in result
        assert "Try broader search terms" in result
        assert "get_event_details" not in result


class TestFormatDetails:
    def test_details(self, api) -> None:
        result = api.format_details(EVENT)
        assert "Event details in the following json" in result
        assert '"eventId":"-2899693953000578799_1763288686574"' in result

    def test_details_sparse(self, api) -> None:
        result = api.format_details({})
        assert "Event details in the following json" in result
        assert "{}" in result
