from __future__ import annotations

from datetime import datetime, timezone

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import NotFoundError
from direct_chat.application.ports.long_poll import WaitBroker
from direct_chat.application.uow import UnitOfWork
from direct_chat.domain.entities.chat_summary import ChatSummary
from direct_chat.domain.entities.message import Message


async def send_message(
    principal: Principal,
    to_user_id: int,
    content: str,
    uow: UnitOfWork,
) -> Message:
    """Store a message. Delivery to long-poll waiters is the caller's job."""
    recipient = await uow.users.get_by_id(to_user_id)
    if recipient is None:
        raise NotFoundError("Recipient not found")

    msg = await uow.messages_w.create(principal.user_id, to_user_id, content)
    await uow.commit()
    return msg


async def list_messages(
    principal: Principal,
    other_user_id: int,
    since: datetime | None,
    uow: UnitOfWork,
    broker: WaitBroker,
) -> list[Message]:
    """Return the conversation with ``other_user_id``.

    Without ``since`` the full history is returned at once. With ``since``,
    only newer messages are returned; if there are none the call long-polls
    until a matching message is published or the wait times out (``[]``).

    The waiter is opened before the store is queried. A message committed
    between the query and the registration still reaches it.
    """
    if since is None:
        return await uow.messages.list_between(principal.user_id, other_user_id)

    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)

    waiter = broker.open(principal.user_id, other_user_id)
    try:
        messages = await uow.messages.list_between(
            principal.user_id, other_user_id, since=since,
        )
        if not messages:
            # End the read transaction so no pooled connection is held while suspended.
            await uow.rollback()
    except BaseException:
        broker.cancel(waiter)
        raise

    if messages:
        broker.cancel(waiter)
        return messages

    return await broker.wait(waiter)


async def list_chats(principal: Principal, uow: UnitOfWork) -> list[ChatSummary]:
    return await uow.messages.list_chats(principal.user_id)
