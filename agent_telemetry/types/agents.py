"""Agent telemetry data models."""

from dataclasses import dataclass, field

DEFAULT_RESULTS_SCORE = 85
DEFAULT_ALIGNMENT_SCORE = 78
DEFAULT_EFFECTIVENESS_SCORE = 82

IMPROVEMENT_TRENDS = ("declining", "stable", "improving")


@dataclass(frozen=True)
class ContributionMetrics:
    """What an agent contributed to business goals."""

    leads_generated: int = 0
    conversion_rate: float = 0  # 0.0 to 1.0
    roi_contribution: float = 0
    goal_achievement_rate: float = 0  # 0.0 to 1.0


@dataclass(frozen=True)
class LearningMetrics:
    """How well an agent is adapting over time."""

    prediction_accuracy: float = 0  # 0.0 to 1.0
    adaptation_rate: float = 0  # 0.0 to 1.0
    strategy_evolution_count: int = 0
    improvement_trend: str = "stable"  # "declining", "stable", "improving"


@dataclass(frozen=True)
class AgentPerformance:
    """Performance scores for one agent. Scores range 0 to 100."""

    results_score: float = DEFAULT_RESULTS_SCORE
    alignment_score: float = DEFAULT_ALIGNMENT_SCORE
    effectiveness_score: float = DEFAULT_EFFECTIVENESS_SCORE
    contribution_metrics: ContributionMetrics = field(default_factory=ContributionMetrics)
    learning_metrics: LearningMetrics = field(default_factory=LearningMetrics)


@dataclass(frozen=True)
class Agent:
    """A fully populated agent record."""

    id: str
    name: str
    kind: str
    performance: AgentPerformance = field(default_factory=AgentPerformance)
    description: str = ""
    capabilities: tuple[str, ...] = ()
    coordination_points: tuple[str, ...] = ()
