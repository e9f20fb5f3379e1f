from __future__ import annotations

from datetime import datetime

from sqlalchemy import and_, case, func, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from direct_chat.domain.entities.chat_summary import ChatSummary
from direct_chat.domain.entities.message import Message
from direct_chat.infrastructure.db.mappers import message as mapper
from direct_chat.infrastructure.db.models.message import MessageModel
from direct_chat.infrastructure.db.models.user import UserModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_between(
        self,
        user_a: int,
        user_b: int,
        *,
        since: datetime | None = None,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                or_(
                    and_(MessageModel.from_user_id == user_a, MessageModel.to_user_id == user_b),
                    and_(MessageModel.from_user_id == user_b, MessageModel.to_user_id == user_a),
                )
            )
            .order_by(MessageModel.timestamp.asc(), MessageModel.id.asc())
        )
        if since is not None:
            stmt = stmt.where(MessageModel.timestamp > since)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_chats(self, user_id: int) -> list[ChatSummary]:
        peer_id = case(
            (MessageModel.from_user_id == user_id, MessageModel.to_user_id),
            else_=MessageModel.from_user_id,
        )
        ranked = (
            select(
                peer_id.label("peer_id"),
                MessageModel.content,
                MessageModel.timestamp,
                func.row_number()
                .over(
                    partition_by=peer_id,
                    order_by=(MessageModel.timestamp.desc(), MessageModel.id.desc()),
                )
                .label("rn"),
            )
            .where(or_(MessageModel.from_user_id == user_id, MessageModel.to_user_id == user_id))
            .subquery()
        )
        stmt = (
            select(
                UserModel.id,
                UserModel.username,
                UserModel.fullname,
                ranked.c.content,
                ranked.c.timestamp,
            )
            .join(ranked, ranked.c.peer_id == UserModel.id)
            .where(ranked.c.rn == 1, UserModel.id != user_id)
            .order_by(ranked.c.timestamp.desc())
        )
        result = await self._session.execute(stmt)
        return [
            ChatSummary(
                user_id=row.id,
                username=row.username,
                fullname=row.fullname,
                last_message=row.content,
                timestamp=row.timestamp,
            )
            for row in result.all()
        ]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, from_user_id: int, to_user_id: int, content: str) -> Message:
        stmt = (
            insert(MessageModel)
            .values(from_user_id=from_user_id, to_user_id=to_user_id, content=content)
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())
