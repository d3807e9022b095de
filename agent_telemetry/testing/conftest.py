"""
Pytest plugin for agent telemetry testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["agent_telemetry.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from agent_telemetry.testing.fixtures import (
    mock_channel,
    mock_source,
    sample_agent,
    sample_collection,
    sample_payload,
    store,
)

__all__ = [
    "mock_source",
    "mock_channel",
    "store",
    "sample_collection",
    "sample_payload",
    "sample_agent",
]
