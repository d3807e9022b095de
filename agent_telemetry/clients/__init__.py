"""Agent telemetry resource clients."""

from agent_telemetry.clients.agents import AgentsClient

__all__ = ["AgentsClient"]
