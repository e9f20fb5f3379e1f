from __future__ import annotations

from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        from_user_id=model.from_user_id,
        to_user_id=model.to_user_id,
        content=model.content,
        timestamp=model.timestamp,
    )
