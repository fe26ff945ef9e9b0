"""
Factor Analyzers

Four independent, stateless functions. Each maps one intake attribute to a
RoutingFactor: a suggested tier, an importance weight and a human-readable
justification. None reads another analyzer's output, so they can run in any
order.

Unknown enumeration values never raise. They degrade to the neutral tier 2
with a reduced weight and a reduced-confidence marker.
"""

from __future__ import annotations

from typing import Any, Final, Optional

from core.tier_engine.config import (
    BudgetKind,
    TierConfiguration,
    TimelineCategory,
    TimelineKind,
)
from core.tier_engine.models import FactorCategory, RoutingFactor
from utils.formatting import format_currency


# Tier suggested when an attribute cannot be interpreted
NEUTRAL_TIER: Final = 2

TIMELINE_CATEGORY_TIERS: Final[dict[TimelineCategory, int]] = {
    TimelineCategory.FAST: 1,
    TimelineCategory.STANDARD: 2,
    TimelineCategory.EXTENDED: 3,
}


# =============================================================================
# Budget
# =============================================================================


def analyze_budget(budget: Any, config: TierConfiguration) -> RoutingFactor:
    """
    Place the budget in a configured bracket.

    Args:
        budget: Numeric amount or budget-range identifier
        config: Tier configuration

    Returns:
        RoutingFactor for the budget category
    """
    weights = config.weights
    resolution = config.resolve_budget(budget)

    if resolution.kind == BudgetKind.PERCENTAGE:
        return RoutingFactor(
            category=FactorCategory.BUDGET,
            suggested_tier=4,
            weight=weights.budget,
            description="Percentage-based pricing indicates Tier 4 project",
        )

    if resolution.kind == BudgetKind.UNCERTAIN:
        return RoutingFactor(
            category=FactorCategory.BUDGET,
            suggested_tier=NEUTRAL_TIER,
            weight=weights.budget_reduced,
            description="Budget unclear - defaulting to mid-tier, needs review",
            reduced_confidence=True,
        )

    if resolution.kind == BudgetKind.UNKNOWN:
        return RoutingFactor(
            category=FactorCategory.BUDGET,
            suggested_tier=NEUTRAL_TIER,
            weight=weights.budget_reduced,
            description=f"Unknown budget range: {resolution.raw} - defaulting to mid-tier",
            reduced_confidence=True,
        )

    thresholds = config.budget_thresholds
    amount = resolution.amount
    tier = thresholds.tier_for_amount(amount)

    weight = weights.budget
    if resolution.kind == BudgetKind.RANGE:
        shown = resolution.budget_range.label
        if resolution.budget_range.spans_tiers(thresholds):
            weight = weights.budget_spanning_range
    else:
        shown = format_currency(amount)

    if amount < thresholds.tier_1_min:
        description = (
            f"Budget ({shown}) is below minimum threshold "
            f"({format_currency(thresholds.tier_1_min)})"
        )
    elif tier == 4:
        description = f"Budget ({shown}) qualifies for Tier 4 ({thresholds.bracket_label(4)})"
    else:
        description = f"Budget ({shown}) fits Tier {tier} range ({thresholds.bracket_label(tier)})"

    return RoutingFactor(
        category=FactorCategory.BUDGET,
        suggested_tier=tier,
        weight=weight,
        description=description,
    )


# =============================================================================
# Timeline
# =============================================================================


def analyze_timeline(
    timeline: Any,
    config: TierConfiguration,
    budget_tier: Optional[int] = None,
) -> RoutingFactor:
    """
    Classify the desired timeline as fast, standard or extended.

    A fast timeline against a high budget tier keeps its suggested tier but
    is emitted with reduced weight and a mismatch note. Feasibility is judged
    by the aggregator, not here.

    Args:
        timeline: Week count or timeline identifier
        config: Tier configuration
        budget_tier: Budget bracket tier computed from the raw budget, if known

    Returns:
        RoutingFactor for the timeline category
    """
    weights = config.weights
    resolution = config.resolve_timeline(timeline)

    if resolution.kind == TimelineKind.UNKNOWN:
        return RoutingFactor(
            category=FactorCategory.TIMELINE,
            suggested_tier=NEUTRAL_TIER,
            weight=weights.timeline_reduced,
            description=f"Unknown timeline: {resolution.raw} - defaulting to standard",
            reduced_confidence=True,
        )

    if resolution.kind == TimelineKind.OPEN:
        return RoutingFactor(
            category=FactorCategory.TIMELINE,
            suggested_tier=NEUTRAL_TIER,
            weight=weights.timeline_reduced,
            description=f"{resolution.label} timeline - tier based on other factors",
        )

    category = config.timeline_thresholds.category_for_weeks(resolution.weeks)
    tier = TIMELINE_CATEGORY_TIERS[category]
    label = resolution.label

    if category == TimelineCategory.FAST:
        if budget_tier is not None and budget_tier >= config.high_budget_tier:
            return RoutingFactor(
                category=FactorCategory.TIMELINE,
                suggested_tier=tier,
                weight=weights.timeline_reduced,
                description=(
                    f"Tight timeline ({label}) may not be feasible "
                    f"for a Tier {budget_tier} budget"
                ),
                reduced_confidence=True,
            )
        description = f"Fast timeline ({label}) suits automated delivery"
    elif category == TimelineCategory.STANDARD:
        description = f"Standard timeline ({label}) allows for guided process"
    else:
        description = f"Extended timeline ({label}) indicates complex project"

    return RoutingFactor(
        category=FactorCategory.TIMELINE,
        suggested_tier=tier,
        weight=weights.timeline,
        description=description,
    )


# =============================================================================
# Project Type
# =============================================================================


def analyze_project_type(project_type: Any, config: TierConfiguration) -> RoutingFactor:
    """Map a project type to its minimum eligible tier."""
    info = config.project_type_info(project_type)

    if info is None:
        return RoutingFactor(
            category=FactorCategory.PROJECT_TYPE,
            suggested_tier=NEUTRAL_TIER,
            weight=config.weights.project_type_reduced,
            description=f"Unknown project type: {project_type}",
            reduced_confidence=True,
        )

    site_visit_note = " (site visit required)" if info.requires_site_visit else ""
    return RoutingFactor(
        category=FactorCategory.PROJECT_TYPE,
        suggested_tier=info.min_tier,
        weight=config.weights.project_type,
        description=f"{info.label} project suits Tier {info.min_tier}+{site_visit_note}",
    )


# =============================================================================
# Assets
# =============================================================================


def analyze_assets(
    has_survey: bool,
    has_drawings: bool,
    config: TierConfiguration,
) -> RoutingFactor:
    """Suggest a tier from survey and drawings availability."""
    rule = config.asset_rule(has_survey, has_drawings)
    return RoutingFactor(
        category=FactorCategory.ASSETS,
        suggested_tier=rule.suggested_tier,
        weight=rule.weight,
        description=rule.description,
    )
