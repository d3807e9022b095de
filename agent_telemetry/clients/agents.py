"""Async Agents resource client."""

from typing import TYPE_CHECKING, Any

from agent_telemetry.exceptions import FetchError
from agent_telemetry.logging import get_logger

if TYPE_CHECKING:
    from agent_telemetry.transport import AsyncHTTPTransport

logger = get_logger("http")


class AgentsClient:
    """Async client for the agent data source.

    Returns raw payloads; normalization is left to the store so that fetched
    and pushed records go through the same write path.
    """

    def __init__(self, transport: "AsyncHTTPTransport") -> None:
        """
        Initialize the agents client.

        Args:
            transport: Async HTTP transport for making requests
        """
        self.transport = transport

    async def fetch_all(self) -> dict[str, Any]:
        """
        Fetch the full agent collection.

        Returns:
            Mapping of agent id to raw agent payload

        Raises:
            FetchError: If the request fails or the body is not a collection
        """
        response = await self.transport.request(method="GET", path="/v1/agents")

        data = response.get("data", response)
        if not isinstance(data, dict):
            raise FetchError(
                "INVALID_RESPONSE",
                f"agent collection must be an object, got {type(data).__name__}",
            )
        logger.debug("fetched %d agent records", len(data))
        return data

    async def fetch(self, agent_id: str) -> dict[str, Any]:
        """
        Fetch one agent.

        Args:
            agent_id: The agent identifier (e.g., "analytics")

        Returns:
            Raw agent payload

        Raises:
            FetchError: If the request fails or the body is not an agent
        """
        response = await self.transport.request(
            method="GET",
            path=f"/v1/agents/{agent_id}",
        )

        data = response.get("data", response)
        if not isinstance(data, dict):
            raise FetchError(
                "INVALID_RESPONSE",
                f"agent {agent_id} must be an object, got {type(data).__name__}",
            )
        return data

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()
