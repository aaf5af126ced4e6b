"""
Monitored entities, entity types and their relationships.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from dt_managed.capabilities.formatting import (
    DEFAULT_DISPLAY_CAP,
    details,
    elide,
    to_json,
    zone_names,
)
from dt_managed.models import ListPage, Relationships, as_dict
from dt_managed.o11y.client import ManagedClient
from dt_managed.o11y.queries import ENTITY_TYPES_PAGE_SIZE, EntityQuery

logger = logging.getLogger(__name__)

MAX_DISPLAY_NAME = 60

COMMON_ENTITY_TYPES = (
    "SERVICE",
    "PROCESS_GROUP",
    "HOST",
    "APPLICATION",
    "CLOUD_APPLICATION",
    "CONTAINER_GROUP_INSTANCE",
    "AWS_LAMBDA_FUNCTION",
    "AZURE_WEB_APP",
)


class EntitiesApi:
    """Queries and formats monitored entities."""

    MAX_TAGS_DISPLAY = DEFAULT_DISPLAY_CAP
    MAX_PROPERTIES_DISPLAY = DEFAULT_DISPLAY_CAP
    MAX_MANAGEMENT_ZONES_DISPLAY = DEFAULT_DISPLAY_CAP

    def __init__(self, client: ManagedClient) -> None:
        self.client = client

    def list_entity_types(self) -> Dict[str, Any]:
        # Large page so the common types can be picked out of a single listing
        response = self.client.get("/api/v2/entityTypes", {"pageSize": ENTITY_TYPES_PAGE_SIZE})
        logger.debug(f"list_entity_types response: {response}")
        return response

    def get_entity_type_details(self, entity_type: str) -> Dict[str, Any]:
        response = self.client.get(f"/api/v2/entityTypes/{quote(entity_type, safe='')}")
        logger.debug(f"get_entity_type_details response, entity_type={entity_type}: {response}")
        return response

    def get_entity_details(self, entity_id: str) -> Dict[str, Any]:
        response = self.client.get(f"/api/v2/entities/{quote(entity_id, safe='')}")
        logger.debug(f"get_entity_details response, entity_id={entity_id}: {response}")
        return response

    def get_entity_relationships(self, entity_id: str) -> Dict[str, Any]:
        """Get an entity's relationship containers, as returned by the API."""
        response = as_dict(self.get_entity_details(entity_id))
        return {
            "entityId": response.get("entityId"),
            "fromRelationships": response.get("fromRelationships"),
            "toRelationships": response.get("toRelationships"),
        }

    def query_entities(self, query: EntityQuery) -> Dict[str, Any]:
        params = query.build()
        response = self.client.get("/api/v2/entities", params)
        logger.debug(f"query_entities params={params} response: {response}")
        return response

    def format_entity_list(self, response: Optional[Dict[str, Any]]) -> str:
        page = ListPage.from_response(response, "entities")

        result = page.header("entities")
        if page.is_limited:
            result += (
                "Not showing all matching entities. Consider using more specific filters "
                "(entitySelector) to get complete results.\n"
            )

        for entity in page.items:
            entity = as_dict(entity)

            display_name = entity.get("displayName")
            if isinstance(display_name, str) and len(display_name) > MAX_DISPLAY_NAME:
                display_name = display_name[: MAX_DISPLAY_NAME - 3] + "..."

            result += f"entityId: {entity.get('entityId')}\n"
            result += f"  type: {entity.get('type') or entity.get('entityType')}\n"
            result += f"  displayName: {display_name}\n"

            tags = entity.get("tags")
            if isinstance(tags, list) and tags:
                labels = [
                    f"{t.get('key')}:{t['value']}" if t.get("value") else f"{t.get('key')}"
                    for t in map(as_dict, tags)
                ]
                result += f"  tags: {elide(labels, self.MAX_TAGS_DISPLAY)}\n"

            properties = entity.get("properties")
            if isinstance(properties, dict) and properties:
                props = [f"{k}={v}" for k, v in properties.items()]
                result += f"  properties: {elide(props, self.MAX_PROPERTIES_DISPLAY)}\n"

            zones = entity.get("managementZones")
            if isinstance(zones, list) and zones:
                result += f"  Management Zones: {elide(zone_names(zones), self.MAX_MANAGEMENT_ZONES_DISPLAY)}\n"

            result += "\n"

        result += "\nNext Steps:\n"
        if page.shown == 0:
            result += "* Verify that the filters such as entitySelector were correct, and search again with different filters.\n"
        if page.is_limited:
            result += "* Use more restrictive filters, such as a more specific entitySelector.\n"
        result += (
            "* If the user is interested in a specific entity, use the get_entity_details tool. "
            "Use the entityId (UUID) for detailed analysis.\n"
            "* If this has returned the entities that the user wanted, consider using the same entitySelector "
            "in subsequent calls such as to the list_problems tool if that has not already been done.\n"
            f"* Suggest to the user that they view the entities in the Dynatrace UI at {self.client.dashboard_url}/\n"
        )
        return result

    def format_entity_type_list(self, response: Optional[Dict[str, Any]]) -> str:
        page = ListPage.from_response(response, "types")

        concise = ""
        available_common = []
        for entity_type in page.items:
            entity_type = as_dict(entity_type)
            type_name = entity_type.get("type")
            display_name = entity_type.get("displayName")

            concise += f"{type_name}"
            if display_name and display_name != type_name:
                concise += f" - {display_name}"
            concise += "\n"

            if type_name in COMMON_ENTITY_TYPES:
                available_common.append(type_name)

        result = page.header("entity types")
        if page.is_limited:
            result += "Not showing all matching entity types as there are too many.\n"
        if available_common:
            result += f"\nCommon entity types include: {', '.join(available_common)}\n"

        result += (
            "\n"
            + concise
            + "\n\nNext Steps:\n"
            "* To get details of a particular entity type, use the get_entity_type_details tool, passing in the type name.\n"
            "* For subsequent user queries, consider using the entity type in the entitySelector parameter "
            'like "type(HOST)" or "type(SERVICE)".\n'
        )
        return result

    def format_entity_type_details(self, response: Any) -> str:
        return details(
            "Entity type",
            response,
            "* To find entities of this type, use the discover_entities tool, using the type in the "
            'entitySelector such as type("HOST") or type("SERVICE").\n',
        )

    def format_entity_details(self, response: Any) -> str:
        return details(
            "Entity",
            response,
            "* Use list_problems or list_events tools with the same entitySelector to check for related "
            "issues and events.\n"
            "* Suggest to the user that they view the entity in the Dynatrace UI at "
            f"{self.client.dashboard_url}/ui/entity/<entityId>, using the entityId in the URL.\n",
        )

    def format_entity_relationships(self, response: Optional[Dict[str, Any]]) -> str:
        response = as_dict(response)
        from_raw = response.get("fromRelationships")
        to_raw = response.get("toRelationships")
        num_from = Relationships.from_raw(from_raw).count()
        num_to = Relationships.from_raw(to_raw).count()

        if num_from == 0 and num_to == 0:
            return f"No relationships found for entity {response.get('entityId')}.\n"

        result = ""
        if num_from > 0:
            result += f"Found {num_from} fromRelationships:\n* {to_json(from_raw)}\n"
        if num_to > 0:
            result += f"Found {num_to} toRelationships:\n* {to_json(to_raw)}\n"

        result += (
            "Next Steps:\n"
            "* Use the get_entity_details tool to get more details of this entity, or of entities that it "
            "has a relationship to/from.\n"
            "* Use list_problems or list_events tools with the same entitySelector by entityId to check for "
            "related issues and events.\n"
            "* Suggest to the user that they view the entity in the Dynatrace UI at "
            f"{self.client.dashboard_url}/ui/entity/<entityId>, using the entityId in the URL.\n"
        )
        return result
