"""
Polling channel.

Emulates a push stream by polling the agent data source and emitting one
update per agent whose payload changed since the previous poll.
"""

import asyncio
import json
from contextlib import suppress
from typing import TYPE_CHECKING, Any

from agent_telemetry.exceptions import RealtimeConnectionError
from agent_telemetry.logging import get_logger
from agent_telemetry.realtime.channel import DropHandler, MessageHandler

if TYPE_CHECKING:
    from agent_telemetry.refresh import AgentDataSource

logger = get_logger("realtime")

DEFAULT_POLL_INTERVAL = 10.0


def fingerprint(payload: Any) -> str:
    """Stable text form of a payload, used for change detection."""
    return json.dumps(payload, sort_keys=True, default=str)


class PollingChannel:
    """Realtime channel that polls the full collection on an interval."""

    def __init__(
        self,
        source: "AgentDataSource",
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """
        Initialize the polling channel.

        Args:
            source: Data source polled with `fetch_all()`
            interval: Seconds between polls
        """
        self.source = source
        self.interval = interval
        self._seen: dict[str, str] = {}
        self._poller: asyncio.Task | None = None

    async def open(self, on_message: MessageHandler, on_drop: DropHandler) -> None:
        """
        Run the first poll, then keep polling in the background.

        Raises:
            RealtimeConnectionError: If the first poll fails
        """
        if self._poller is not None:
            return

        self._seen.clear()
        try:
            await self._poll(on_message)
        except Exception as e:
            raise RealtimeConnectionError(f"initial poll failed: {e}") from e

        self._poller = asyncio.create_task(self._run(on_message, on_drop))

    async def close(self) -> None:
        """Stop polling."""
        poller, self._poller = self._poller, None
        if poller is None:
            return
        poller.cancel()
        with suppress(asyncio.CancelledError):
            await poller

    async def _run(self, on_message: MessageHandler, on_drop: DropHandler) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._poll(on_message)
            except Exception as e:
                self._poller = None
                on_drop(RealtimeConnectionError(f"poll failed: {e}"))
                return

    async def _poll(self, on_message: MessageHandler) -> None:
        collection = await self.source.fetch_all()

        changed = 0
        for agent_id, payload in collection.items():
            digest = fingerprint(payload)
            if self._seen.get(agent_id) == digest:
                continue
            self._seen[agent_id] = digest
            changed += 1
            if isinstance(payload, dict) and payload.get("id") is None:
                payload = {**payload, "id": agent_id}
            on_message(payload)

        if changed:
            logger.debug("poll found %d changed agents", changed)


__all__ = ["PollingChannel", "fingerprint"]
