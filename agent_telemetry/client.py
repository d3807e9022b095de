"""
Agent telemetry async client.

Bundles the HTTP transport, the agents resource client and the realtime
channel that talk to one telemetry API.
"""

from typing import Any

from agent_telemetry.clients import AgentsClient
from agent_telemetry.config import TelemetryConfig
from agent_telemetry.realtime.channel import RealtimeChannel
from agent_telemetry.realtime.polling import DEFAULT_POLL_INTERVAL, PollingChannel
from agent_telemetry.realtime.sse import SSEChannel
from agent_telemetry.transport import AsyncHTTPTransport, RetryConfig


class AsyncTelemetryClient:
    """
    Async client for the agent telemetry API.

    Example:
        ```python
        import asyncio
        from agent_telemetry import AsyncTelemetryClient

        async def main():
            async with AsyncTelemetryClient("https://telemetry.example.com") as client:
                collection = await client.agents.fetch_all()
                print(sorted(collection))

        asyncio.run(main())
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the async telemetry client.

        Args:
            base_url: Base URL of the telemetry API
            api_key: Optional bearer token
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)
        """
        self.base_url = base_url
        self.timeout = timeout

        self._transport = AsyncHTTPTransport(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            retry_config=retry_config,
        )

        self.agents = AgentsClient(self._transport)

    @classmethod
    def from_config(cls, config: TelemetryConfig) -> "AsyncTelemetryClient":
        """Create a client from a TelemetryConfig."""
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            timeout=config.timeout,
            retry_config=config.retry_config,
        )

    @classmethod
    def from_env(cls) -> "AsyncTelemetryClient":
        """
        Create a client from AGENT_TELEMETRY_* environment variables.

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        return cls.from_config(TelemetryConfig.from_env())

    def realtime_channel(
        self,
        mode: str = "sse",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> RealtimeChannel:
        """
        Build a realtime channel against this API.

        Args:
            mode: "sse" streams /v1/agents/stream; "polling" polls /v1/agents
            poll_interval: Seconds between polls in polling mode

        Returns:
            An unopened channel
        """
        if mode == "polling":
            return PollingChannel(self.agents, interval=poll_interval)
        return SSEChannel(self._transport.client)

    @property
    def transport(self) -> AsyncHTTPTransport:
        """Get the underlying async HTTP transport (for advanced use cases)."""
        return self._transport

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._transport.close()

    async def __aenter__(self) -> "AsyncTelemetryClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit - closes the client."""
        await self.close()
