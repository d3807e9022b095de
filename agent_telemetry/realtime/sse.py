"""
Server-sent events channel.

Streams agent updates from `GET /v1/agents/stream` over the shared httpx
client. Each event's `data` is one agent payload, either bare or wrapped
as `{"type": "agent-update", "data": {...}}`.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

import httpx

from agent_telemetry.exceptions import RealtimeConnectionError
from agent_telemetry.logging import get_logger
from agent_telemetry.realtime.channel import DropHandler, MessageHandler

logger = get_logger("realtime")

AGENT_EVENT_TYPES = frozenset({"message", "agent-update", "agent-health-update"})


@dataclass
class ServerSentEvent:
    """One dispatched event from a text/event-stream body."""

    event: str
    data: str
    id: str | None = None


async def iter_events(lines: AsyncIterator[str]) -> AsyncIterator[ServerSentEvent]:
    """Group text/event-stream lines into events.

    Comment lines and unknown fields are skipped. Multi-line data is joined
    with newlines. Events with no data are not dispatched.
    """
    event = "message"
    data: list[str] = []
    event_id: str | None = None

    async for line in lines:
        if not line:
            if data:
                yield ServerSentEvent(event=event, data="\n".join(data), id=event_id)
            event, data, event_id = "message", [], None
            continue
        if line.startswith(":"):
            continue

        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if name == "data":
            data.append(value)
        elif name == "event":
            event = value or "message"
        elif name == "id":
            event_id = value

    if data:
        yield ServerSentEvent(event=event, data="\n".join(data), id=event_id)


class SSEChannel:
    """Realtime channel backed by a server-sent event stream."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        path: str = "/v1/agents/stream",
        open_timeout: float = 30.0,
    ) -> None:
        """
        Initialize the SSE channel.

        Args:
            client: httpx client pointed at the telemetry API
            path: Stream endpoint path
            open_timeout: Seconds to wait for the stream to open. Reads never
                time out; an idle stream is normal.
        """
        self.client = client
        self.path = path
        self.open_timeout = open_timeout
        self._reader: asyncio.Task | None = None
        self._closing = False

    async def open(self, on_message: MessageHandler, on_drop: DropHandler) -> None:
        """
        Open the stream and start delivering events.

        Raises:
            RealtimeConnectionError: If the request fails or is not answered with 200
        """
        if self._reader is not None:
            return

        request = self.client.build_request(
            "GET",
            self.path,
            headers={"Accept": "text/event-stream"},
            timeout=httpx.Timeout(self.open_timeout, read=None),
        )
        try:
            response = await self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise RealtimeConnectionError(f"could not open {self.path}: {e}") from e

        if response.status_code != 200:
            await response.aclose()
            raise RealtimeConnectionError(
                f"{self.path} answered HTTP {response.status_code}"
            )

        self._closing = False
        self._reader = asyncio.create_task(self._read(response, on_message, on_drop))

    async def close(self) -> None:
        """Stop reading and release the response."""
        reader, self._reader = self._reader, None
        if reader is None:
            return
        self._closing = True
        reader.cancel()
        with suppress(asyncio.CancelledError):
            await reader

    async def _read(
        self,
        response: httpx.Response,
        on_message: MessageHandler,
        on_drop: DropHandler,
    ) -> None:
        error: Exception
        try:
            async for event in iter_events(response.aiter_lines()):
                self._dispatch(event, on_message)
            error = RealtimeConnectionError("stream closed by server")
        except Exception as e:
            error = RealtimeConnectionError(f"stream interrupted: {e}")
        finally:
            await response.aclose()

        self._reader = None
        if not self._closing:
            on_drop(error)

    def _dispatch(self, event: ServerSentEvent, on_message: MessageHandler) -> None:
        if event.event not in AGENT_EVENT_TYPES:
            logger.debug("ignoring %s event", event.event)
            return

        try:
            payload: Any = json.loads(event.data)
        except json.JSONDecodeError:
            # Delivered as-is; the store drops it as malformed.
            on_message(event.data)
            return

        if isinstance(payload, dict) and "type" in payload and "data" in payload:
            if payload["type"] not in AGENT_EVENT_TYPES:
                logger.debug("ignoring %s envelope", payload["type"])
                return
            payload = payload["data"]

        on_message(payload)


__all__ = ["SSEChannel", "ServerSentEvent", "iter_events"]
