"""
Command envelope carried by each stream entry.

Stream fields:
    id        correlation id chosen by the caller
    pattern   command pattern, e.g. "product.find-one"
    data      JSON-encoded payload
    reply_to  list key the reply is pushed to
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


class EnvelopeError(ValueError):
    """Stream entry cannot be turned into a command."""


@dataclass(frozen=True)
class CommandEnvelope:
    id: str
    pattern: str
    data: Any
    reply_to: str | None = None

    def to_fields(self) -> dict[str, str]:
        fields = {
            "id": self.id,
            "pattern": self.pattern,
            "data": json.dumps(self.data, default=str),
        }
        if self.reply_to:
            fields["reply_to"] = self.reply_to
        return fields


def _text(value: Any) -> str | None:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def parse_envelope(message_id: str, fields: dict) -> CommandEnvelope:
    """
    Build an envelope from raw stream fields.

    The stream message id stands in for a missing correlation id.

    Raises:
        EnvelopeError: if the pattern is missing or data is not valid JSON.
    """
    decoded = {_text(k): _text(v) for k, v in fields.items()}

    pattern = decoded.get("pattern")
    if not pattern:
        raise EnvelopeError("Command envelope has no pattern")

    raw_data = decoded.get("data")
    try:
        data = json.loads(raw_data) if raw_data else None
    except json.JSONDecodeError as e:
        raise EnvelopeError(f"Command data is not valid JSON: {e.msg}") from e

    return CommandEnvelope(
        id=decoded.get("id") or str(_text(message_id)),
        pattern=pattern,
        data=data,
        reply_to=decoded.get("reply_to") or None,
    )
