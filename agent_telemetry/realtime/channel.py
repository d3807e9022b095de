"""Realtime channel contract."""

from collections.abc import Callable
from typing import Any, Protocol

MessageHandler = Callable[[Any], None]
DropHandler = Callable[[Exception], None]


class RealtimeChannel(Protocol):
    """A push transport delivering individual agent-update payloads.

    `open()` returns once the channel is live and raises if it cannot be
    opened. While open, the channel calls `on_message` with each raw
    payload and calls `on_drop` once if the stream ends on its own.
    `close()` ends the stream without calling `on_drop`. A closed channel
    may be opened again.
    """

    async def open(self, on_message: MessageHandler, on_drop: DropHandler) -> None:
        ...

    async def close(self) -> None:
        ...
