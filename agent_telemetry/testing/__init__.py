"""Agent telemetry testing utilities.

Provides mock collaborators and fixtures for testing applications that
consume the synchronization store.
"""

from agent_telemetry.testing.fixtures import create_mock_agent, create_mock_payload
from agent_telemetry.testing.mock import (
    MockAgentDataSource,
    MockCall,
    MockRealtimeChannel,
    MockResponse,
)

__all__ = [
    # Mock collaborators
    "MockAgentDataSource",
    "MockRealtimeChannel",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_payload",
    "create_mock_agent",
]
