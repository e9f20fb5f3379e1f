"""Long-poll scenarios driven through the ASGI app on a single event loop."""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from direct_chat.api.deps import get_broker, get_uow
from direct_chat.app import create_app
from direct_chat.infrastructure.longpoll.broker import LongPollBroker
from tests.conftest import FakeUoW, auth_headers, make_user


@pytest.fixture
def broker() -> LongPollBroker:
    return LongPollBroker(timeout=1.0)


@pytest.fixture
def api(broker):
    app = create_app()
    uow = FakeUoW()
    for user_id, name in ((1, "alice"), (2, "bob"), (3, "carol")):
        uow.add_user(make_user(user_id=user_id, username=name, password_hash="unused"))

    async def _override():
        yield uow

    app.dependency_overrides[get_uow] = _override
    app.dependency_overrides[get_broker] = lambda: broker
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


async def _poll(client: httpx.AsyncClient, me: int, other: int, since: datetime) -> httpx.Response:
    return await client.get(
        f"/api/chat/{other}/messages",
        params={"since": since.isoformat()},
        headers=auth_headers(me),
    )


async def _wait_for_waiters(broker: LongPollBroker, count: int) -> None:
    for _ in range(100):
        if broker.pending() >= count:
            return
        await asyncio.sleep(0.01)
    raise AssertionError(f"expected {count} pending waiter(s), got {broker.pending()}")


@pytest.mark.asyncio
async def test_waiting_user_receives_message_from_counterpart(api, broker):
    async with api as client:
        since = datetime.now(timezone.utc)
        poll = asyncio.create_task(_poll(client, 1, 2, since))
        await _wait_for_waiters(broker, 1)

        sent = await client.post("/api/chat/1/messages", headers=auth_headers(2), json={"content": "hello"})
        assert sent.status_code == 200

        resp = await asyncio.wait_for(poll, timeout=2)

    body = resp.json()
    assert body["message"] == "New messages received"
    assert [(m["from_user_id"], m["to_user_id"], m["content"]) for m in body["data"]] == [
        (2, 1, "hello"),
    ]
    assert broker.pending() == 0


@pytest.mark.asyncio
async def test_senders_other_session_receives_own_message(api, broker):
    async with api as client:
        since = datetime.now(timezone.utc)
        poll = asyncio.create_task(_poll(client, 1, 2, since))
        await _wait_for_waiters(broker, 1)

        await client.post("/api/chat/2/messages", headers=auth_headers(1), json={"content": "from my phone"})

        resp = await asyncio.wait_for(poll, timeout=2)

    assert [m["content"] for m in resp.json()["data"]] == ["from my phone"]


@pytest.mark.asyncio
async def test_unrelated_message_does_not_resolve_wait(api, broker):
    async with api as client:
        since = datetime.now(timezone.utc)
        poll = asyncio.create_task(_poll(client, 1, 2, since))
        await _wait_for_waiters(broker, 1)

        await client.post("/api/chat/1/messages", headers=auth_headers(3), json={"content": "hi from carol"})
        await asyncio.sleep(0.05)
        assert not poll.done()
        assert broker.pending() == 1

        await client.post("/api/chat/1/messages", headers=auth_headers(2), json={"content": "hi from bob"})
        resp = await asyncio.wait_for(poll, timeout=2)

    assert [m["content"] for m in resp.json()["data"]] == ["hi from bob"]


@pytest.mark.asyncio
async def test_two_waiters_for_same_conversation_both_resolve(api, broker):
    async with api as client:
        since = datetime.now(timezone.utc)
        first = asyncio.create_task(_poll(client, 1, 2, since))
        second = asyncio.create_task(_poll(client, 1, 2, since))
        await _wait_for_waiters(broker, 2)

        await client.post("/api/chat/1/messages", headers=auth_headers(2), json={"content": "to both"})

        responses = await asyncio.wait_for(asyncio.gather(first, second), timeout=2)

    assert [[m["content"] for m in r.json()["data"]] for r in responses] == [["to both"], ["to both"]]
