from __future__ import annotations

from direct_chat.domain.entities.user import User
from direct_chat.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        username=model.username,
        fullname=model.fullname,
        email=model.email,
        avatar=model.avatar,
        password_hash=model.password_hash,
        created_at=model.created_at,
    )
