"""Realtime channels delivering live agent updates."""

from agent_telemetry.realtime.channel import DropHandler, MessageHandler, RealtimeChannel
from agent_telemetry.realtime.polling import PollingChannel
from agent_telemetry.realtime.sse import SSEChannel, ServerSentEvent, iter_events

__all__ = [
    "RealtimeChannel",
    "MessageHandler",
    "DropHandler",
    "SSEChannel",
    "ServerSentEvent",
    "iter_events",
    "PollingChannel",
]
