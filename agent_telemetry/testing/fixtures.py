"""
Pytest fixtures for agent telemetry testing.

Provides mock collaborators, sample payloads and a ready-to-use store.
"""

from typing import Any

import pytest

from agent_telemetry.normalize import normalize
from agent_telemetry.store import SyncStore
from agent_telemetry.testing.mock import MockAgentDataSource, MockRealtimeChannel
from agent_telemetry.types.agents import Agent


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_payload(
    agent_id: str = "analytics",
    **performance: Any,
) -> dict[str, Any]:
    """
    Create a raw agent payload in wire form.

    Args:
        agent_id: Agent ID
        **performance: camelCase performance fields (e.g., resultsScore=90)

    Returns:
        Payload dict with only the given performance fields set
    """
    payload: dict[str, Any] = {"id": agent_id}
    if performance:
        payload["performance"] = dict(performance)
    return payload


def create_mock_agent(
    agent_id: str = "analytics",
    **performance: Any,
) -> Agent:
    """
    Create a normalized Agent with customizable performance fields.

    Args:
        agent_id: Agent ID
        **performance: camelCase performance fields (e.g., resultsScore=90)

    Returns:
        Agent object
    """
    return normalize(create_mock_payload(agent_id, **performance))


# ============================================================================
# Mock Collaborator Fixtures
# ============================================================================


@pytest.fixture
def sample_collection() -> dict[str, Any]:
    """Provide a fetched collection of three agents."""
    return {
        "analytics": create_mock_payload("analytics", resultsScore=90),
        "campaign": create_mock_payload(
            "campaign",
            contributionMetrics={"leadsGenerated": 3, "conversionRate": 0.12},
        ),
        "content": create_mock_payload(
            "content",
            learningMetrics={"improvementTrend": "improving"},
        ),
    }


@pytest.fixture
def mock_source(sample_collection: dict[str, Any]) -> MockAgentDataSource:
    """
    Provide a MockAgentDataSource serving `sample_collection`.

    Example:
        ```python
        async def test_refresh(store, mock_source):
            await store.refresh_all_data()
            assert mock_source.call_count("fetch_all") == 1
        ```
    """
    return MockAgentDataSource(sample_collection)


@pytest.fixture
def mock_channel() -> MockRealtimeChannel:
    """Provide a MockRealtimeChannel."""
    return MockRealtimeChannel()


@pytest.fixture
def store(mock_source: MockAgentDataSource, mock_channel: MockRealtimeChannel) -> SyncStore:
    """
    Provide a SyncStore over the mock collaborators.

    Freshness caching and automatic reconnects are off so each test
    controls every fetch and every open.
    """
    return SyncStore(
        mock_source,
        mock_channel,
        cache_ttl=0,
        auto_reconnect=False,
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Provide a partial payload carrying one score."""
    return create_mock_payload("analytics", resultsScore=90)


@pytest.fixture
def sample_agent() -> Agent:
    """Provide a sample normalized Agent."""
    return create_mock_agent("analytics", resultsScore=90)
