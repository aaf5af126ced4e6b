"""
Response models shared by the capability modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

UNKNOWN_TOTAL = -1


class RelationshipsKind(str, Enum):
    """Shape of a relationship container."""

    SEQUENCE = "sequence"
    MAPPING = "mapping"
    NULL = "null"
    SCALAR = "scalar"


@dataclass(frozen=True)
class Relationships:
    """
    An entity's ``fromRelationships`` or ``toRelationships`` value.

    The API returns these as a list or a map depending on the entity, and
    older clusters have been seen returning nulls and bare strings.
    """

    kind: RelationshipsKind
    raw: Any = None

    @classmethod
    def from_raw(cls, value: Any) -> "Relationships":
        if value is None:
            return cls(RelationshipsKind.NULL)
        if isinstance(value, (list, tuple)):
            return cls(RelationshipsKind.SEQUENCE, value)
        if isinstance(value, Mapping):
            return cls(RelationshipsKind.MAPPING, value)
        return cls(RelationshipsKind.SCALAR, value)

    def count(self) -> int:
        if self.kind in (RelationshipsKind.SEQUENCE, RelationshipsKind.MAPPING):
            return len(self.raw)
        if self.kind == RelationshipsKind.NULL:
            return 0
        # Falsy scalars ("", 0, false) carry no relationship
        return 1 if self.raw else 0


@dataclass
class ListPage:
    """One page of a list response."""

    items: List[Any] = field(default_factory=list)
    total_count: int = UNKNOWN_TOTAL
    next_key: Optional[str] = None

    @classmethod
    def from_response(cls, response: Optional[Mapping[str, Any]], items_key: str) -> "ListPage":
        """
        Read a list envelope.

        Args:
            response: Raw response body (may be sparse or None)
            items_key: Name of the item list, e.g. "entities"

        Returns:
            ListPage with UNKNOWN_TOTAL when the response has no count
        """
        response = response if isinstance(response, Mapping) else {}
        items = response.get(items_key)
        total = response.get("totalCount")
        return cls(
            items=list(items) if isinstance(items, (list, tuple)) else [],
            total_count=total if isinstance(total, int) and total else UNKNOWN_TOTAL,
            next_key=response.get("nextPageKey") or response.get("nextSliceKey"),
        )

    @property
    def shown(self) -> int:
        return len(self.items)

    @property
    def is_limited(self) -> bool:
        """True when the API reported more matches than were returned."""
        return self.total_count != UNKNOWN_TOTAL and self.total_count > self.shown

    def header(self, label: str) -> str:
        total = "" if self.total_count == UNKNOWN_TOTAL else f" of {self.total_count}"
        return f"Listing {self.shown}{total} {label}.\n"


def as_dict(value: Any) -> Dict[str, Any]:
    """Return value if it is a mapping, else an empty dict."""
    return dict(value) if isinstance(value, Mapping) else {}
