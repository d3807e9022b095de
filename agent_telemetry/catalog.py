"""Known agents of the marketing suite.

The dashboard tracks fifteen agents. Payloads often carry only an id and
numbers, so the normalizer fills identity fields from this catalog.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogEntry:
    """Static identity of a known agent."""

    id: str
    name: str
    kind: str  # "lead-generation", "content-strategy", "intelligence", "technical"
    description: str
    capabilities: tuple[str, ...]
    coordination_points: tuple[str, ...]


_ENTRIES = (
    # Lead generation
    CatalogEntry(
        id="campaign",
        name="Campaign Agent",
        kind="lead-generation",
        description="Multi-channel campaign coordination and strategy execution",
        capabilities=(
            "campaign_strategy_creation",
            "multi_agent_coordination",
            "timeline_management",
            "performance_attribution",
            "cross_channel_optimization",
        ),
        coordination_points=("paidSocial", "emailMarketing", "content", "social"),
    ),
    CatalogEntry(
        id="paidSocial",
        name="Paid Social Agent",
        kind="lead-generation",
        description="Cold audience acquisition and conversion campaigns",
        capabilities=(
            "cold_audience_targeting",
            "creative_generation",
            "budget_optimization",
            "platform_coordination",
            "performance_tracking",
            "lead_qualification",
        ),
        coordination_points=("graphics", "campaign", "retargeting"),
    ),
    CatalogEntry(
        id="emailMarketing",
        name="Email Marketing Agent",
        kind="lead-generation",
        description="Automated email workflows and lead nurturing",
        capabilities=(
            "personalized_email_creation",
            "ab_testing_framework",
            "hubspot_workflow_integration",
            "dealer_segmentation",
            "performance_optimization",
        ),
        coordination_points=("campaign", "dealerIntelligence", "content"),
    ),
    CatalogEntry(
        id="retargeting",
        name="Retargeting Agent",
        kind="lead-generation",
        description="Re-engagement and conversion optimization",
        capabilities=(
            "audience_segmentation",
            "behavioral_targeting",
            "conversion_optimization",
            "cross_platform_retargeting",
        ),
        coordination_points=("paidSocial", "analytics", "dealerIntelligence"),
    ),
    # Content and strategy
    CatalogEntry(
        id="content",
        name="Content Agent",
        kind="content-strategy",
        description="Marketing content creation and optimization",
        capabilities=(
            "content_creation",
            "seo_optimization",
            "brand_alignment",
            "performance_tracking",
        ),
        coordination_points=("strategy", "graphics", "websiteSeo"),
    ),
    CatalogEntry(
        id="social",
        name="Social Agent",
        kind="content-strategy",
        description="Social media management and engagement",
        capabilities=(
            "social_media_posting",
            "engagement_tracking",
            "community_management",
            "brand_monitoring",
        ),
        coordination_points=("graphics", "content", "campaign"),
    ),
    CatalogEntry(
        id="strategy",
        name="Strategy Agent",
        kind="content-strategy",
        description="Marketing strategy and planning",
        capabilities=(
            "strategic_planning",
            "market_analysis",
            "competitive_intelligence",
            "opportunity_identification",
        ),
        coordination_points=("marketIntelligence", "campaign", "content"),
    ),
    CatalogEntry(
        id="graphics",
        name="Graphics Agent",
        kind="content-strategy",
        description="Visual content and design creation",
        capabilities=(
            "visual_content_creation",
            "brand_consistency",
            "multi_platform_optimization",
            "creative_testing",
        ),
        coordination_points=("paidSocial", "social", "content"),
    ),
    # Intelligence and analytics
    CatalogEntry(
        id="analytics",
        name="Analytics Agent",
        kind="intelligence",
        description="Performance tracking and business intelligence",
        capabilities=(
            "performance_tracking",
            "conversion_analysis",
            "attribution_modeling",
            "predictive_analytics",
        ),
        coordination_points=("campaign", "retargeting", "internalInsights"),
    ),
    CatalogEntry(
        id="dealerIntelligence",
        name="Dealer Intelligence Agent",
        kind="intelligence",
        description="Dealer behavior analysis and lead qualification",
        capabilities=(
            "content_validation",
            "dealer_behavior_analysis",
            "prediction_tracking",
            "graduated_autonomy",
        ),
        coordination_points=("emailMarketing", "retargeting", "analytics"),
    ),
    CatalogEntry(
        id="marketIntelligence",
        name="Market Intelligence Agent",
        kind="intelligence",
        description="Market trends and competitive analysis",
        capabilities=(
            "market_trend_analysis",
            "competitive_intelligence",
            "opportunity_identification",
            "industry_insights",
        ),
        coordination_points=("strategy", "semrush", "analytics"),
    ),
    CatalogEntry(
        id="internalInsights",
        name="Internal Insights Agent",
        kind="intelligence",
        description="Internal performance metrics and optimization",
        capabilities=(
            "system_performance_monitoring",
            "lead_quality_analysis",
            "agent_utilization_tracking",
            "cost_optimization_insights",
            "internal_metrics_aggregation",
        ),
        coordination_points=("analytics", "campaign", "dealerIntelligence"),
    ),
    # Technical
    CatalogEntry(
        id="editor",
        name="Editor Agent",
        kind="technical",
        description="Content editing and quality assurance",
        capabilities=(
            "content_editing",
            "quality_assurance",
            "brand_compliance",
            "publishing_workflow",
        ),
        coordination_points=("content", "emailMarketing", "social"),
    ),
    CatalogEntry(
        id="websiteSeo",
        name="Website SEO Agent",
        kind="technical",
        description="SEO monitoring and website optimization",
        capabilities=(
            "seo_monitoring",
            "technical_optimization",
            "keyword_tracking",
            "site_health_analysis",
        ),
        coordination_points=("content", "semrush", "analytics"),
    ),
    CatalogEntry(
        id="semrush",
        name="SEMRush Agent",
        kind="technical",
        description="SEO insights and competitive analysis",
        capabilities=(
            "keyword_research",
            "competitive_analysis",
            "ranking_tracking",
            "seo_optimization",
        ),
        coordination_points=("websiteSeo", "content", "marketIntelligence"),
    ),
)

AGENT_CATALOG: dict[str, CatalogEntry] = {entry.id: entry for entry in _ENTRIES}


def lookup(agent_id: str) -> CatalogEntry | None:
    """Return the catalog entry for an agent id, or None if unknown."""
    return AGENT_CATALOG.get(agent_id)


__all__ = ["AGENT_CATALOG", "CatalogEntry", "lookup"]
