from __future__ import annotations

from sqlalchemy import or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from direct_chat.application.exceptions import ConflictError
from direct_chat.domain.entities.user import User
from direct_chat.infrastructure.db.mappers import user as mapper
from direct_chat.infrastructure.db.models.user import UserModel


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class UserReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self._session.get(UserModel, user_id)
        return mapper.model_to_entity(result) if result else None

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def find_conflicting(
        self,
        *,
        username: str | None = None,
        email: str | None = None,
        exclude_id: int | None = None,
    ) -> User | None:
        clauses = []
        if username is not None:
            clauses.append(UserModel.username == username)
        if email is not None:
            clauses.append(UserModel.email == email)
        if not clauses:
            return None
        stmt = select(UserModel).where(or_(*clauses))
        if exclude_id is not None:
            stmt = stmt.where(UserModel.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def search(self, query: str, *, exclude_id: int, limit: int = 20) -> list[User]:
        pattern = _like_pattern(query)
        stmt = (
            select(UserModel)
            .where(
                or_(
                    UserModel.username.ilike(pattern, escape="\\"),
                    UserModel.fullname.ilike(pattern, escape="\\"),
                ),
                UserModel.id != exclude_id,
            )
            .order_by(UserModel.username)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class UserWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        username: str,
        fullname: str,
        email: str,
        password_hash: str,
    ) -> User:
        stmt = (
            pg_insert(UserModel)
            .values(
                username=username,
                fullname=fullname,
                email=email,
                password_hash=password_hash,
            )
            .on_conflict_do_nothing()
            .returning(UserModel)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            raise ConflictError("User already exists")
        return mapper.model_to_entity(row)

    async def update_profile(self, user_id: int, changes: dict[str, str]) -> User | None:
        if not changes:
            model = await self._session.get(UserModel, user_id)
            return mapper.model_to_entity(model) if model else None
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(**changes)
            .returning(UserModel)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            raise ConflictError("Username or email already taken") from exc
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def set_password_hash(self, user_id: int, password_hash: str) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(password_hash=password_hash)
        )
        await self._session.execute(stmt)
