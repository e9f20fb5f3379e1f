from __future__ import annotations

import asyncio

import pytest

from direct_chat.infrastructure.longpoll.notifier import Notifier
from direct_chat.infrastructure.longpoll.registry import WaitRegistry
from direct_chat.infrastructure.longpoll.supervisor import TimeoutSupervisor
from tests.conftest import make_message, make_waiter


@pytest.fixture
def registry() -> WaitRegistry:
    return WaitRegistry()


@pytest.mark.asyncio
async def test_expiry_resolves_with_empty_list(registry):
    supervisor = TimeoutSupervisor(registry, timeout=0.05)
    waiter = make_waiter(1, 2)
    registry.register(waiter)
    supervisor.arm(waiter)

    result = await asyncio.wait_for(waiter.future, timeout=1)

    assert result == []
    assert waiter.id not in registry
    assert waiter.timer is None


@pytest.mark.asyncio
async def test_publish_before_expiry_wins_and_disarms(registry):
    supervisor = TimeoutSupervisor(registry, timeout=0.05)
    notifier = Notifier(registry)
    waiter = make_waiter(1, 2)
    registry.register(waiter)
    supervisor.arm(waiter)
    msg = make_message(from_user_id=2, to_user_id=1)

    notifier.publish(msg)
    await asyncio.sleep(0.1)

    assert waiter.future.result() == [msg]
    assert waiter.timer is None


@pytest.mark.asyncio
@pytest.mark.parametrize("publish_first", [True, False])
async def test_publish_and_expiry_race_resolves_once(registry, publish_first):
    supervisor = TimeoutSupervisor(registry, timeout=60)
    notifier = Notifier(registry)
    waiter = make_waiter(1, 2)
    registry.register(waiter)
    supervisor.arm(waiter)
    msg = make_message(from_user_id=2, to_user_id=1)

    resolutions = []
    waiter.future.add_done_callback(lambda f: resolutions.append(f.result()))

    if publish_first:
        delivered = notifier.publish(msg)
        supervisor._expire(waiter)
    else:
        supervisor._expire(waiter)
        delivered = notifier.publish(msg)
    await asyncio.sleep(0)

    assert resolutions == ([[msg]] if publish_first else [[]])
    assert delivered == (1 if publish_first else 0)
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_expiry_of_abandoned_request_is_harmless(registry):
    supervisor = TimeoutSupervisor(registry, timeout=0.01)
    waiter = make_waiter(1, 2)
    registry.register(waiter)
    supervisor.arm(waiter)
    waiter.future.cancel()

    await asyncio.sleep(0.05)

    assert waiter.id not in registry


@pytest.mark.parametrize("timeout", [0, -1])
def test_timeout_must_be_positive(timeout):
    with pytest.raises(ValueError):
        TimeoutSupervisor(WaitRegistry(), timeout=timeout)
