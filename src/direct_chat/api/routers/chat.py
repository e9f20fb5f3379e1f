from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, Query

from direct_chat.api.deps import BrokerDep, CurrentPrincipal, PublisherDep, UoWDep
from direct_chat.api.schemas.common import Envelope
from direct_chat.api.schemas.message import (
    ChatSummaryResponse,
    MessageResponse,
    SendMessageRequest,
)
from direct_chat.services import message_service

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.get("/list", response_model=Envelope[list[ChatSummaryResponse]])
async def list_chats(
    principal: CurrentPrincipal,
    uow: UoWDep,
) -> Envelope[list[ChatSummaryResponse]]:
    chats = await message_service.list_chats(principal, uow)
    return Envelope(
        message="Chats retrieved successfully",
        data=[ChatSummaryResponse.model_validate(c, from_attributes=True) for c in chats],
    )


@router.get("/{user_id}/messages", response_model=Envelope[list[MessageResponse]])
async def list_messages(
    user_id: int,
    principal: CurrentPrincipal,
    uow: UoWDep,
    broker: BrokerDep,
    since: datetime | None = Query(None, description="ISO8601; long-polls when nothing is newer"),
) -> Envelope[list[MessageResponse]]:
    messages = await message_service.list_messages(principal, user_id, since, uow, broker)
    if since is not None and not messages:
        text = "No new messages"
    elif since is not None:
        text = "New messages received"
    else:
        text = "Messages retrieved successfully"
    return Envelope(
        message=text,
        data=[MessageResponse.model_validate(m, from_attributes=True) for m in messages],
    )


@router.post("/{to_user_id}/messages", response_model=Envelope[MessageResponse])
async def send_message(
    to_user_id: int,
    body: SendMessageRequest,
    principal: CurrentPrincipal,
    uow: UoWDep,
    publisher: PublisherDep,
    background_tasks: BackgroundTasks,
) -> Envelope[MessageResponse]:
    msg = await message_service.send_message(principal, to_user_id, body.content, uow)
    # Runs after the response has been sent to the sender.
    background_tasks.add_task(publisher.publish, msg)
    return Envelope(
        message="Message sent successfully",
        data=MessageResponse.model_validate(msg, from_attributes=True),
    )
