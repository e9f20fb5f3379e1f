from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from direct_chat.domain.entities.message import Message

MESSAGE_CREATED = "chat.message_created"


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, UUID):
            return str(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def serialize_event(event_type: str, payload: dict[str, Any]) -> str:
    envelope = {"event": event_type, "data": payload}
    return json.dumps(envelope, cls=_Encoder)


def deserialize_event(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    data = json.loads(raw)
    return data["event"], data["data"]


def message_to_payload(message: Message) -> dict[str, Any]:
    return {
        "id": message.id,
        "from_user_id": message.from_user_id,
        "to_user_id": message.to_user_id,
        "content": message.content,
        "timestamp": message.timestamp,
    }


def message_from_payload(data: dict[str, Any]) -> Message:
    return Message(
        id=int(data["id"]),
        from_user_id=int(data["from_user_id"]),
        to_user_id=int(data["to_user_id"]),
        content=data["content"],
        timestamp=datetime.fromisoformat(data["timestamp"]),
    )
