"""
Tests for the realtime connection manager.

Feature: agent-telemetry
"""

import asyncio
from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from agent_telemetry.connection import (
    CONNECTED,
    CONNECTING,
    DISCONNECTED,
    ERROR,
    ConnectionManager,
    ReconnectPolicy,
)
from agent_telemetry.testing import MockRealtimeChannel

# Reconnect delays short enough to run in tests
FAST_POLICY = ReconnectPolicy(base_delay=0.001, max_delay=0.01, max_attempts=3, jitter=0)


def make_manager(
    channel: MockRealtimeChannel,
    received: list[Any] | None = None,
    auto_reconnect: bool = False,
    policy: ReconnectPolicy | None = None,
) -> tuple[ConnectionManager, list[tuple[str, str]]]:
    sink = received if received is not None else []
    manager = ConnectionManager(
        channel,
        on_update=sink.append,
        policy=policy or FAST_POLICY,
        auto_reconnect=auto_reconnect,
    )
    transitions: list[tuple[str, str]] = []
    manager.add_listener(lambda previous, current: transitions.append((previous, current)))
    return manager, transitions


async def wait_for_status(manager: ConnectionManager, status: str, timeout: float = 1.0) -> None:
    async def poll() -> None:
        while manager.status != status:
            await asyncio.sleep(0.001)

    await asyncio.wait_for(poll(), timeout)


# ============================================================================
# Backoff policy
# ============================================================================


@given(
    base_delay=st.floats(min_value=0.1, max_value=5.0),
    backoff_factor=st.floats(min_value=1.1, max_value=4.0),
    attempt=st.integers(min_value=1, max_value=6),
)
@settings(max_examples=100)
def test_reconnect_delay_grows_exponentially(
    base_delay: float, backoff_factor: float, attempt: int
) -> None:
    """
    The delay before attempt N is base_delay * backoff_factor^(N-1), ±jitter.
    """
    policy = ReconnectPolicy(
        base_delay=base_delay,
        backoff_factor=backoff_factor,
        max_delay=10_000.0,
        jitter=0.1,
    )

    expected = base_delay * backoff_factor ** (attempt - 1)
    actual = policy.delay_for(attempt)

    assert expected * 0.9 - 1e-9 <= actual <= expected * 1.1 + 1e-9


@given(attempt=st.integers(min_value=1, max_value=50))
@settings(max_examples=100)
def test_reconnect_delay_is_capped(attempt: int) -> None:
    """
    No delay exceeds max_delay.
    """
    policy = ReconnectPolicy(base_delay=1.0, backoff_factor=2.0, max_delay=30.0)

    assert 0 <= policy.delay_for(attempt) <= 30.0


def test_default_policy_matches_documented_schedule() -> None:
    policy = ReconnectPolicy(jitter=0)

    assert [policy.delay_for(n) for n in range(1, 6)] == [1.0, 2.0, 4.0, 8.0, 16.0]
    assert policy.max_attempts == 5


# ============================================================================
# State machine
# ============================================================================


@pytest.mark.asyncio
async def test_initial_state_is_disconnected() -> None:
    manager, _ = make_manager(MockRealtimeChannel())

    assert manager.status == DISCONNECTED
    assert not manager.is_connected()


@pytest.mark.asyncio
async def test_connect_success_transitions() -> None:
    channel = MockRealtimeChannel()
    manager, transitions = make_manager(channel)

    await manager.connect()

    assert manager.is_connected()
    assert transitions == [(DISCONNECTED, CONNECTING), (CONNECTING, CONNECTED)]
    assert channel.open_count == 1


@pytest.mark.asyncio
async def test_connect_failure_transitions_without_raising() -> None:
    channel = MockRealtimeChannel()
    channel.fail_next_open()
    manager, transitions = make_manager(channel)

    await manager.connect()

    assert manager.status == DISCONNECTED
    assert transitions == [
        (DISCONNECTED, CONNECTING),
        (CONNECTING, ERROR),
        (ERROR, DISCONNECTED),
    ]


@pytest.mark.asyncio
async def test_unexpected_open_errors_are_absorbed() -> None:
    channel = MockRealtimeChannel()
    channel.fail_next_open(ValueError("bad handshake"))
    manager, _ = make_manager(channel)

    await manager.connect()

    assert manager.status == DISCONNECTED


@pytest.mark.asyncio
async def test_connecting_state_visible_while_opening() -> None:
    channel = MockRealtimeChannel()
    channel.hold()
    manager, _ = make_manager(channel)

    task = asyncio.create_task(manager.connect())
    await wait_for_status(manager, CONNECTING)
    assert not manager.is_connected()

    channel.release()
    await task

    assert manager.status == CONNECTED


@pytest.mark.asyncio
async def test_connect_twice_when_connected_opens_once() -> None:
    channel = MockRealtimeChannel()
    manager, _ = make_manager(channel)

    await manager.connect()
    await manager.connect()
    await manager.connect()

    assert channel.open_count == 1


@pytest.mark.asyncio
async def test_concurrent_connects_share_one_open() -> None:
    channel = MockRealtimeChannel()
    channel.hold()
    manager, _ = make_manager(channel)

    tasks = [asyncio.create_task(manager.connect()) for _ in range(5)]
    await wait_for_status(manager, CONNECTING)
    channel.release()
    await asyncio.gather(*tasks)

    assert channel.open_count == 1
    assert manager.is_connected()


@pytest.mark.asyncio
async def test_retry_after_failure_opens_again() -> None:
    channel = MockRealtimeChannel()
    channel.fail_next_open()
    manager, _ = make_manager(channel)

    await manager.connect()
    await manager.connect()

    assert manager.is_connected()
    assert channel.open_count == 2


@pytest.mark.asyncio
async def test_disconnect_closes_channel() -> None:
    channel = MockRealtimeChannel()
    manager, transitions = make_manager(channel)

    await manager.connect()
    await manager.disconnect()

    assert manager.status == DISCONNECTED
    assert channel.close_count == 1
    assert transitions[-1] == (CONNECTED, DISCONNECTED)


@pytest.mark.asyncio
async def test_disconnect_when_disconnected_is_noop() -> None:
    channel = MockRealtimeChannel()
    manager, transitions = make_manager(channel)

    await manager.disconnect()
    await manager.disconnect()

    assert channel.close_count == 0
    assert transitions == []


@pytest.mark.asyncio
async def test_disconnect_during_open_cancels_it() -> None:
    channel = MockRealtimeChannel()
    channel.hold()
    manager, _ = make_manager(channel)

    task = asyncio.create_task(manager.connect())
    await wait_for_status(manager, CONNECTING)
    await manager.disconnect()
    await task

    assert manager.status == DISCONNECTED
    assert not channel.is_open


@pytest.mark.asyncio
async def test_pushed_updates_reach_write_path() -> None:
    channel = MockRealtimeChannel()
    received: list[Any] = []
    manager, _ = make_manager(channel, received)

    await manager.connect()
    channel.push({"id": "analytics"})

    assert received == [{"id": "analytics"}]


@pytest.mark.asyncio
async def test_write_path_errors_do_not_break_channel() -> None:
    channel = MockRealtimeChannel()

    def explode(payload: Any) -> None:
        raise RuntimeError("boom")

    manager = ConnectionManager(channel, on_update=explode, auto_reconnect=False)
    await manager.connect()

    channel.push({"id": "analytics"})

    assert manager.is_connected()


@pytest.mark.asyncio
async def test_listener_errors_do_not_break_transitions() -> None:
    channel = MockRealtimeChannel()
    manager, _ = make_manager(channel)

    def explode(previous: str, current: str) -> None:
        raise RuntimeError("boom")

    manager.add_listener(explode)
    await manager.connect()

    assert manager.is_connected()


@pytest.mark.asyncio
async def test_removed_listener_not_called() -> None:
    manager = ConnectionManager(MockRealtimeChannel(), on_update=lambda payload: None)
    seen: list[tuple[str, str]] = []
    remove = manager.add_listener(lambda previous, current: seen.append((previous, current)))

    remove()
    remove()
    await manager.connect()

    assert seen == []
    await manager.disconnect()


# ============================================================================
# Drops and reconnects
# ============================================================================


@pytest.mark.asyncio
async def test_drop_moves_through_error_to_disconnected() -> None:
    channel = MockRealtimeChannel()
    manager, transitions = make_manager(channel)

    await manager.connect()
    channel.drop()

    assert manager.status == DISCONNECTED
    assert transitions[-2:] == [(CONNECTED, ERROR), (ERROR, DISCONNECTED)]


@pytest.mark.asyncio
async def test_drop_triggers_reconnect() -> None:
    channel = MockRealtimeChannel()
    manager, _ = make_manager(channel, auto_reconnect=True)

    await manager.connect()
    channel.drop()
    await wait_for_status(manager, CONNECTED)

    assert channel.open_count == 2
    assert manager.attempts == 0


@pytest.mark.asyncio
async def test_failed_open_retries_with_backoff() -> None:
    channel = MockRealtimeChannel()
    channel.fail_next_open(times=2)
    manager, _ = make_manager(channel, auto_reconnect=True)

    await manager.connect()
    await wait_for_status(manager, CONNECTED)

    assert channel.open_count == 3


@pytest.mark.asyncio
async def test_reconnect_gives_up_after_max_attempts() -> None:
    channel = MockRealtimeChannel()
    channel.fail_next_open(times=10)
    manager, _ = make_manager(channel, auto_reconnect=True)

    await manager.connect()
    for _ in range(100):
        await asyncio.sleep(0.002)

    assert manager.status == DISCONNECTED
    assert manager.attempts == FAST_POLICY.max_attempts
    assert channel.open_count == 1 + FAST_POLICY.max_attempts


@pytest.mark.asyncio
async def test_manual_connect_resets_attempts() -> None:
    channel = MockRealtimeChannel()
    channel.fail_next_open(times=1 + FAST_POLICY.max_attempts)
    manager, _ = make_manager(channel, auto_reconnect=True)

    await manager.connect()
    for _ in range(100):
        await asyncio.sleep(0.002)
    assert manager.attempts == FAST_POLICY.max_attempts

    await manager.connect()

    assert manager.is_connected()
    assert manager.attempts == 0


@pytest.mark.asyncio
async def test_disconnect_cancels_pending_reconnect() -> None:
    channel = MockRealtimeChannel()
    slow = ReconnectPolicy(base_delay=60.0, jitter=0)
    manager, _ = make_manager(channel, auto_reconnect=True, policy=slow)

    await manager.connect()
    channel.drop()
    await manager.disconnect()
    await asyncio.sleep(0.01)

    assert channel.open_count == 1
    assert manager.status == DISCONNECTED
