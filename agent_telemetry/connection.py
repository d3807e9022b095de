"""
Realtime connection management.

Owns the lifecycle of the live-update channel:

    disconnected -> connecting -> connected
    connecting | connected -> error -> disconnected   (failure)
    connected -> disconnected                         (explicit close)

Failures never propagate to callers. They are recorded as state and,
unless disabled, followed by a reconnect with bounded exponential backoff.
"""

import asyncio
import random
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from agent_telemetry.logging import get_logger, log_connection_transition
from agent_telemetry.realtime.channel import RealtimeChannel

logger = get_logger("realtime")

DISCONNECTED = "disconnected"
CONNECTING = "connecting"
CONNECTED = "connected"
ERROR = "error"

TransitionListener = Callable[[str, str], None]


@dataclass
class ReconnectPolicy:
    """Bounded exponential backoff between reconnect attempts."""

    base_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 30.0
    max_attempts: int = 5
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)

    def delay_for(self, attempt: int) -> float:
        """
        Seconds to wait before a reconnect attempt.

        Args:
            attempt: Reconnect attempt number (1-indexed)

        Returns:
            base_delay * backoff_factor ** (attempt - 1), jittered and capped
        """
        base_wait = self.base_delay * self.backoff_factor ** (attempt - 1)
        jitter_range = base_wait * self.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)
        return max(0.0, min(wait_time, self.max_delay))


class ConnectionManager:
    """Single owner of one realtime channel.

    At most one channel is live per manager. Concurrent `connect()` calls
    share the in-flight open.
    """

    def __init__(
        self,
        channel: RealtimeChannel,
        on_update: Callable[[Any], None],
        policy: ReconnectPolicy | None = None,
        auto_reconnect: bool = True,
    ) -> None:
        """
        Initialize the connection manager.

        Args:
            channel: Channel to open and close
            on_update: Write path receiving each pushed raw payload
            policy: Reconnect backoff policy
            auto_reconnect: Reconnect after a drop or failed open
        """
        self.channel = channel
        self.policy = policy or ReconnectPolicy()
        self.auto_reconnect = auto_reconnect
        self._on_update = on_update
        self._status = DISCONNECTED
        self._opening: asyncio.Task | None = None
        self._reconnecting: asyncio.Task | None = None
        self._closing = False
        self._attempts = 0
        self._listeners: list[TransitionListener] = []

    @property
    def status(self) -> str:
        """Current state: disconnected, connecting, connected or error."""
        return self._status

    @property
    def attempts(self) -> int:
        """Reconnect attempts made since the last successful open."""
        return self._attempts

    def is_connected(self) -> bool:
        return self._status == CONNECTED

    def add_listener(self, listener: TransitionListener) -> Callable[[], None]:
        """
        Observe state transitions.

        Args:
            listener: Called with (previous, current) after each transition

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def remove() -> None:
            with suppress(ValueError):
                self._listeners.remove(listener)

        return remove

    async def connect(self) -> None:
        """Open the channel unless it is already connecting or connected."""
        if self._status == CONNECTED:
            return

        if self._opening is None:
            self._cancel_reconnect()
            self._attempts = 0
            self._opening = asyncio.create_task(self._open())

        opening = self._opening
        try:
            await asyncio.shield(opening)
        except asyncio.CancelledError:
            # A disconnect() cancelled the open; only our own cancellation propagates.
            if not opening.cancelled():
                raise

    async def disconnect(self) -> None:
        """Close the channel. A no-op when already disconnected."""
        self._cancel_reconnect()

        opening, self._opening = self._opening, None
        if opening is not None:
            opening.cancel()
            with suppress(asyncio.CancelledError):
                await opening

        if self._status == DISCONNECTED:
            return

        self._closing = True
        try:
            await self.channel.close()
        except Exception as e:
            logger.warning("error while closing channel: %s", e)
        finally:
            self._closing = False
        self._transition(DISCONNECTED, "closed")

    async def _open(self) -> None:
        self._transition(CONNECTING)
        try:
            await self.channel.open(self._handle_message, self._handle_drop)
        except Exception as e:
            self._opening = None
            self._fail(e)
        else:
            self._opening = None
            self._attempts = 0
            self._transition(CONNECTED)

    def _handle_message(self, payload: Any) -> None:
        try:
            self._on_update(payload)
        except Exception:
            logger.exception("failed to apply pushed update")

    def _handle_drop(self, error: Exception) -> None:
        if self._closing or self._status != CONNECTED:
            return
        self._fail(error)

    def _fail(self, error: Exception) -> None:
        self._transition(ERROR, str(error))
        self._transition(DISCONNECTED)
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if not self.auto_reconnect or self._closing:
            return
        if self._attempts >= self.policy.max_attempts:
            logger.error(
                "giving up after %d reconnect attempts; call connect() to retry",
                self._attempts,
            )
            return

        self._attempts += 1
        delay = self.policy.delay_for(self._attempts)
        logger.info(
            "reconnect attempt %d/%d in %.2fs",
            self._attempts, self.policy.max_attempts, delay,
        )
        self._reconnecting = asyncio.create_task(self._reconnect_after(delay))

    async def _reconnect_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._reconnecting = None
        if self._status != DISCONNECTED or self._opening is not None:
            return
        self._opening = asyncio.create_task(self._open())

    def _cancel_reconnect(self) -> None:
        reconnecting, self._reconnecting = self._reconnecting, None
        if reconnecting is not None:
            reconnecting.cancel()

    def _transition(self, status: str, reason: str | None = None) -> None:
        previous = self._status
        if previous == status:
            return
        self._status = status
        log_connection_transition(previous, status, reason)
        for listener in list(self._listeners):
            try:
                listener(previous, status)
            except Exception:
                logger.exception("connection listener failed")


__all__ = [
    "ConnectionManager",
    "ReconnectPolicy",
    "DISCONNECTED",
    "CONNECTING",
    "CONNECTED",
    "ERROR",
]
