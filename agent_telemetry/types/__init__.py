"""Agent telemetry type definitions."""

from agent_telemetry.types.agents import (
    IMPROVEMENT_TRENDS,
    Agent,
    AgentPerformance,
    ContributionMetrics,
    LearningMetrics,
)

__all__ = [
    "Agent",
    "AgentPerformance",
    "ContributionMetrics",
    "LearningMetrics",
    "IMPROVEMENT_TRENDS",
]
