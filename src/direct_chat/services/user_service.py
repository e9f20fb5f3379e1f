from __future__ import annotations

from direct_chat.application.dto.principal import Principal
from direct_chat.application.dto.user import ProfileUpdateDTO
from direct_chat.application.exceptions import ConflictError, NotFoundError, ValidationError
from direct_chat.application.ports.auth import PasswordHasher
from direct_chat.application.uow import UnitOfWork
from direct_chat.domain.entities.user import User

SEARCH_LIMIT = 20


async def get_profile(principal: Principal, uow: UnitOfWork) -> User:
    user = await uow.users.get_by_id(principal.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def update_profile(
    principal: Principal,
    data: ProfileUpdateDTO,
    uow: UnitOfWork,
) -> User:
    changes = data.changes()
    if "username" in changes or "email" in changes:
        taken = await uow.users.find_conflicting(
            username=changes.get("username"),
            email=changes.get("email"),
            exclude_id=principal.user_id,
        )
        if taken is not None:
            raise ConflictError("Username or email already taken")

    user = await uow.users_w.update_profile(principal.user_id, changes)
    if user is None:
        raise NotFoundError("User not found")
    await uow.commit()
    return user


async def change_password(
    principal: Principal,
    old_password: str,
    new_password: str,
    confirm_password: str,
    uow: UnitOfWork,
    hasher: PasswordHasher,
) -> None:
    if new_password != confirm_password:
        raise ValidationError("Passwords do not match")

    user = await get_profile(principal, uow)
    if not await hasher.verify(old_password, user.password_hash):
        raise ValidationError("Incorrect old password")

    await uow.users_w.set_password_hash(user.id, await hasher.hash(new_password))
    await uow.commit()


async def search_users(principal: Principal, query: str, uow: UnitOfWork) -> list[User]:
    return await uow.users.search(query, exclude_id=principal.user_id, limit=SEARCH_LIMIT)
