"""
Agent record normalization.

Turns raw or partial agent payloads into complete `Agent` records. Every
leaf field is filled on its own, so a payload carrying only `resultsScore`
keeps the default contribution and learning metrics, and vice versa.

Present values pass through unchanged. Values outside their documented
range are accepted as-is and only noted at DEBUG level.
"""

from collections.abc import Mapping
from dataclasses import asdict
from typing import Any

from agent_telemetry.catalog import lookup
from agent_telemetry.exceptions import MalformedPayloadError
from agent_telemetry.logging import get_logger
from agent_telemetry.types.agents import (
    IMPROVEMENT_TRENDS,
    Agent,
    AgentPerformance,
    ContributionMetrics,
    LearningMetrics,
)

logger = get_logger("store")

_MISSING = object()

# Older agent builds report "up"/"down" instead of the trend names.
_TREND_ALIASES = {"up": "improving", "down": "declining"}

_SCORE_RANGE = (0, 100)
_RATE_RANGE = (0, 1)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _get(raw: Mapping[str, Any], name: str) -> Any:
    """Read a field by its camelCase wire name, falling back to snake_case."""
    for key in (_camel(name), name):
        value = raw.get(key, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return _MISSING


def _section(raw: Mapping[str, Any], name: str, agent_id: str) -> Mapping[str, Any]:
    value = _get(raw, name)
    if value is _MISSING:
        return {}
    if not isinstance(value, Mapping):
        raise MalformedPayloadError(
            f"{_camel(name)} must be an object, got {type(value).__name__}", agent_id
        )
    return value


def _number(
    raw: Mapping[str, Any],
    name: str,
    default: float,
    agent_id: str,
    bounds: tuple[float, float] | None = None,
) -> float:
    value = _get(raw, name)
    if value is _MISSING:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedPayloadError(
            f"{_camel(name)} must be a number, got {value!r}", agent_id
        )
    if bounds is not None and not bounds[0] <= value <= bounds[1]:
        logger.debug(
            "agent %s: %s=%r outside [%s, %s], kept as-is",
            agent_id, _camel(name), value, bounds[0], bounds[1],
        )
    return value


def _count(raw: Mapping[str, Any], name: str, agent_id: str) -> int:
    value = _number(raw, name, 0, agent_id)
    if isinstance(value, float):
        if not value.is_integer():
            raise MalformedPayloadError(
                f"{_camel(name)} must be a whole number, got {value!r}", agent_id
            )
        value = int(value)
    if value < 0:
        logger.debug("agent %s: %s=%r is negative, kept as-is", agent_id, _camel(name), value)
    return value


def _text(raw: Mapping[str, Any], name: str, agent_id: str) -> Any:
    value = _get(raw, name)
    if value is not _MISSING and not isinstance(value, str):
        raise MalformedPayloadError(
            f"{_camel(name)} must be a string, got {type(value).__name__}", agent_id
        )
    return value


def _strings(raw: Mapping[str, Any], name: str, agent_id: str) -> Any:
    value = _get(raw, name)
    if value is _MISSING:
        return value
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise MalformedPayloadError(f"{_camel(name)} must be a list of strings", agent_id)
    return tuple(value)


def _trend(raw: Mapping[str, Any], agent_id: str) -> str:
    value = _get(raw, "improvement_trend")
    if value is _MISSING:
        return "stable"
    if not isinstance(value, str):
        raise MalformedPayloadError(f"improvementTrend must be a string, got {value!r}", agent_id)
    value = _TREND_ALIASES.get(value, value)
    if value not in IMPROVEMENT_TRENDS:
        raise MalformedPayloadError(f"unknown improvementTrend {value!r}", agent_id)
    return value


def _contribution(raw: Mapping[str, Any], agent_id: str) -> ContributionMetrics:
    return ContributionMetrics(
        leads_generated=_count(raw, "leads_generated", agent_id),
        conversion_rate=_number(raw, "conversion_rate", 0, agent_id, _RATE_RANGE),
        roi_contribution=_number(raw, "roi_contribution", 0, agent_id),
        goal_achievement_rate=_number(raw, "goal_achievement_rate", 0, agent_id, _RATE_RANGE),
    )


def _learning(raw: Mapping[str, Any], agent_id: str) -> LearningMetrics:
    return LearningMetrics(
        prediction_accuracy=_number(raw, "prediction_accuracy", 0, agent_id, _RATE_RANGE),
        adaptation_rate=_number(raw, "adaptation_rate", 0, agent_id, _RATE_RANGE),
        strategy_evolution_count=_count(raw, "strategy_evolution_count", agent_id),
        improvement_trend=_trend(raw, agent_id),
    )


def _performance(raw: Mapping[str, Any], agent_id: str) -> AgentPerformance:
    defaults = AgentPerformance()
    return AgentPerformance(
        results_score=_number(raw, "results_score", defaults.results_score, agent_id, _SCORE_RANGE),
        alignment_score=_number(raw, "alignment_score", defaults.alignment_score, agent_id, _SCORE_RANGE),
        effectiveness_score=_number(
            raw, "effectiveness_score", defaults.effectiveness_score, agent_id, _SCORE_RANGE
        ),
        contribution_metrics=_contribution(_section(raw, "contribution_metrics", agent_id), agent_id),
        learning_metrics=_learning(_section(raw, "learning_metrics", agent_id), agent_id),
    )


def normalize(raw: Mapping[str, Any] | Agent) -> Agent:
    """
    Build a complete agent record from a raw or partial payload.

    Args:
        raw: Agent payload using camelCase (wire) or snake_case keys,
            or an already normalized Agent

    Returns:
        Agent with every field populated

    Raises:
        MalformedPayloadError: If the payload cannot be parsed
    """
    if isinstance(raw, Agent):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedPayloadError(f"agent payload must be an object, got {type(raw).__name__}")

    agent_id = raw.get("id")
    if not isinstance(agent_id, str) or not agent_id:
        raise MalformedPayloadError("agent payload has no id")

    entry = lookup(agent_id)

    name = _text(raw, "name", agent_id)
    if name is _MISSING:
        name = entry.name if entry else agent_id

    kind = _text(raw, "kind", agent_id)
    if kind is _MISSING:
        kind = _text(raw, "category", agent_id)
    if kind is _MISSING:
        kind = entry.kind if entry else "unknown"

    description = _text(raw, "description", agent_id)
    if description is _MISSING:
        description = entry.description if entry else ""

    capabilities = _strings(raw, "capabilities", agent_id)
    if capabilities is _MISSING:
        capabilities = entry.capabilities if entry else ()

    coordination_points = _strings(raw, "coordination_points", agent_id)
    if coordination_points is _MISSING:
        coordination_points = entry.coordination_points if entry else ()

    return Agent(
        id=agent_id,
        name=name,
        kind=kind,
        performance=_performance(_section(raw, "performance", agent_id), agent_id),
        description=description,
        capabilities=capabilities,
        coordination_points=coordination_points,
    )


def normalize_collection(raw: Mapping[str, Any]) -> dict[str, Agent]:
    """
    Normalize a fetched agent collection keyed by agent id.

    Payloads without an id take it from their key. Malformed entries are
    dropped with a warning; they never fail the whole collection.

    Args:
        raw: Mapping of agent id to raw agent payload

    Returns:
        Mapping of agent id to Agent, in the order received
    """
    agents: dict[str, Agent] = {}
    for key, payload in raw.items():
        if isinstance(payload, Mapping) and payload.get("id") is None:
            payload = {**payload, "id": key}
        try:
            agent = normalize(payload)
        except MalformedPayloadError as e:
            logger.warning("dropping malformed agent %r: %s", key, e.message)
            continue
        agents[agent.id] = agent
    return agents


def to_payload(agent: Agent) -> dict[str, Any]:
    """
    Serialize an Agent back to its camelCase wire form.

    `normalize(to_payload(agent)) == agent` holds for every agent.
    """
    def convert(value: Any) -> Any:
        if isinstance(value, dict):
            return {_camel(k): convert(v) for k, v in value.items()}
        if isinstance(value, tuple):
            return list(value)
        return value

    return convert(asdict(agent))


__all__ = ["normalize", "normalize_collection", "to_payload"]
