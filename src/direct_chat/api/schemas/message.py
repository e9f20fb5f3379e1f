from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SendMessageRequest(BaseModel):
    content: str = Field(min_length=1, max_length=4000)


class MessageResponse(BaseModel):
    id: int
    from_user_id: int
    to_user_id: int
    content: str
    timestamp: datetime

    model_config = {"from_attributes": True}


class ChatSummaryResponse(BaseModel):
    user_id: int
    username: str
    fullname: str
    last_message: str
    timestamp: datetime

    model_config = {"from_attributes": True}
