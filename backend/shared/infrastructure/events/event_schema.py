"""
Event Schema.

Defines the Event dataclass for catalog events published on Redis pub/sub.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from typing import Any

# Upper bound for a serialized event
MAX_EVENT_SIZE = 64 * 1024


@dataclass
class Event:
    """
    Catalog event.

    `data` carries the event payload (for product events, `{"product_id": ...}`).
    """

    type: str
    data: dict[str, Any] = field(default_factory=dict)
    ts: str | None = None
    v: int = 1  # Schema version

    def __post_init__(self) -> None:
        if not self.type or not isinstance(self.type, str):
            raise ValueError("Event type must be a non-empty string")

        if self.data is not None and not isinstance(self.data, dict):
            raise ValueError("Event data must be a dict or None")

    def to_json(self) -> str:
        """Serialize event to JSON string."""
        payload = asdict(self)
        payload["data"] = payload["data"] or {}
        payload["ts"] = payload["ts"] or datetime.now(timezone.utc).isoformat()
        return json.dumps(payload, ensure_ascii=False, default=str)

    @classmethod
    def for_product(cls, event_type: str, product_id: str) -> "Event":
        return cls(type=event_type, data={"product_id": product_id})
