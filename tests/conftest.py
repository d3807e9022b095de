"""Shared fixtures for agent telemetry tests."""

from agent_telemetry.testing.fixtures import (  # noqa: F401
    mock_channel,
    mock_source,
    sample_agent,
    sample_collection,
    sample_payload,
    store,
)
