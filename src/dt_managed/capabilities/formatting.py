"""
Helpers for rendering API responses as text.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Iterable, List

DEFAULT_DISPLAY_CAP = 11


def format_timestamp(timestamp: Any) -> str:
    """
    Render epoch milliseconds (or an ISO string) as ``YYYY-MM-DD HH:MM:SS`` UTC.

    Returns ``Invalid timestamp: <value>`` instead of raising.
    """
    try:
        if isinstance(timestamp, bool):
            raise TypeError(timestamp)
        if isinstance(timestamp, (int, float)):
            dt = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
        elif isinstance(timestamp, str):
            try:
                dt = datetime.fromtimestamp(float(timestamp) / 1000, tz=timezone.utc)
            except ValueError:
                dt = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
                if dt.tzinfo is not None:
                    dt = dt.astimezone(timezone.utc)
        elif isinstance(timestamp, datetime):
            dt = timestamp
        else:
            raise TypeError(timestamp)
        return dt.strftime("%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError, OverflowError, OSError):
        return f"Invalid timestamp: {timestamp}"


def elide(values: Iterable[Any], cap: int = DEFAULT_DISPLAY_CAP) -> str:
    """Join the first ``cap`` values, noting how many were left out."""
    values = list(values)
    text = ", ".join(str(v) for v in values[:cap])
    if len(values) > cap:
        text += f" (+{len(values) - cap} more)"
    return text


def zone_names(zones: Iterable[Any]) -> List[str]:
    """Management zone names, falling back to the id or the raw value."""
    names = []
    for zone in zones:
        if isinstance(zone, dict):
            names.append(zone.get("name") or zone.get("id") or zone)
        else:
            names.append(zone)
    return names


def to_json(value: Any) -> str:
    """Compact JSON, as returned by the API."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def details(kind: str, response: Any, next_steps: str) -> str:
    """Render a detail response as JSON followed by guidance."""
    return (
        f"{kind} details in the following json:\n"
        + to_json(response if response is not None else {})
        + "\nNext Steps:\n"
        + next_steps
    )
