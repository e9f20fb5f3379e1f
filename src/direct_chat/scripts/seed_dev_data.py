"""Seed development data: creates two users and a short conversation."""
from __future__ import annotations

import asyncio
import logging

from direct_chat.config import settings
from direct_chat.infrastructure.auth.bcrypt_hasher import BcryptHasher
from direct_chat.infrastructure.db.session import AsyncSessionLocal
from direct_chat.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)

DEV_PASSWORD = "secret123"


async def seed() -> None:
    hasher = BcryptHasher(settings.BCRYPT_ROUNDS)
    password_hash = await hasher.hash(DEV_PASSWORD)

    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUoW(session)

        alice = await uow.users.get_by_username("alice") or await uow.users_w.create(
            "alice", "Alice Liddell", "alice@example.com", password_hash,
        )
        bob = await uow.users.get_by_username("bob") or await uow.users_w.create(
            "bob", "Bob Builder", "bob@example.com", password_hash,
        )

        messages_data = [
            (alice.id, bob.id, "Hi Bob!"),
            (bob.id, alice.id, "Hey Alice, how are you?"),
            (alice.id, bob.id, "Great, thanks. Lunch tomorrow?"),
            (bob.id, alice.id, "Sure, noon works."),
        ]
        for from_user_id, to_user_id, content in messages_data:
            await uow.messages_w.create(from_user_id, to_user_id, content)

        await uow.commit()
        logger.info(
            "Seeded users %s/%s (password %r) with %d messages",
            alice.username, bob.username, DEV_PASSWORD, len(messages_data),
        )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())


if __name__ == "__main__":
    main()
