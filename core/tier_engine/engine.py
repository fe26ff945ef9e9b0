"""
Tier Recommendation Engine

Combines the four factor analyzers into one deterministic recommendation.

Pipeline order:
1. VALIDATE - Reject structurally incomplete intake
2. ANALYZE - Run the four independent factor analyzers
3. WEIGHT - Weighted average of suggested tiers, rounded half up
4. OVERRIDE - Hard floors that may only raise the tier
5. CONFIDENCE - Agreement between factors and the final tier
6. RED FLAGS - Policy checklist against the raw intake
7. REVIEW - Decide whether a human must confirm the tier
8. EXPLAIN - Alternative tiers and reason string

The engine is a pure function of (intake, configuration). It performs no
I/O and keeps no state between calls.
"""

from __future__ import annotations

import math
from typing import Final

from core.tier_engine.analyzers import (
    analyze_assets,
    analyze_budget,
    analyze_project_type,
    analyze_timeline,
)
from core.tier_engine.config import (
    DEFAULT_TIER_CONFIGURATION,
    BudgetKind,
    TierConfiguration,
    TimelineCategory,
)
from core.tier_engine.models import (
    ConfidenceLevel,
    FactorCategory,
    IntakeData,
    RoutingFactor,
    TierRecommendation,
    clamp_tier,
)
from core.tier_engine.validation import ensure_valid_intake
from utils.formatting import format_currency


# =============================================================================
# Constants
# =============================================================================

# Agreement ratios for confidence bands
HIGH_AGREEMENT_RATIO: Final = 0.75
MEDIUM_AGREEMENT_RATIO: Final = 0.5

# A factor agrees with the final tier when within this distance
AGREEMENT_DISTANCE: Final = 1
# A high-importance factor this far from the final tier forces low confidence
CONFLICT_DISTANCE: Final = 2

# Red-flag messages, in checklist order
RED_FLAG_BUDGET_BELOW_MINIMUM: Final = "Budget below minimum threshold"
RED_FLAG_TIMELINE_UNREALISTIC: Final = "Timeline unrealistic for project complexity"
RED_FLAG_NO_ASSETS_FAST: Final = "No existing assets but expecting fast delivery"
RED_FLAG_COMPLEX_LOW_BUDGET: Final = "Complex project type with insufficient budget"
RED_FLAG_HIGH_BUDGET_FAST: Final = "High budget project with unrealistic timeline"
RED_FLAG_MULTIPLE_PROPERTIES: Final = "Multiple properties require white-glove service evaluation"

RED_FLAG_MESSAGES: Final[tuple[str, ...]] = (
    RED_FLAG_BUDGET_BELOW_MINIMUM,
    RED_FLAG_TIMELINE_UNREALISTIC,
    RED_FLAG_NO_ASSETS_FAST,
    RED_FLAG_COMPLEX_LOW_BUDGET,
    RED_FLAG_HIGH_BUDGET_FAST,
    RED_FLAG_MULTIPLE_PROPERTIES,
)

_CATEGORY_ORDER: Final[dict[FactorCategory, int]] = {
    category: index for index, category in enumerate(FactorCategory)
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3)."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


class TierRecommendationEngine:
    """
    Deterministic tier recommendation for intake data.

    Holds a reference to one immutable TierConfiguration; every call reads
    that snapshot only.
    """

    def __init__(self, config: TierConfiguration = DEFAULT_TIER_CONFIGURATION):
        """
        Initialize the engine.

        Args:
            config: Rule set to score against (default: canonical configuration)
        """
        self._config = config

    @property
    def config(self) -> TierConfiguration:
        return self._config

    def recommend(self, intake: IntakeData) -> TierRecommendation:
        """
        Produce a tier recommendation for one intake.

        Args:
            intake: Structured intake answers

        Returns:
            TierRecommendation with tier, confidence, review flag and audit trail

        Raises:
            InvalidInputError: If the intake is structurally incomplete
        """
        # Step 1: Reject malformed input before any scoring
        ensure_valid_intake(intake)

        # Step 2: Independent factor analysis
        factors = self.analyze(intake)

        # Step 3: Weighted tier
        weighted_tier = self._calculate_weighted_tier(factors)

        # Step 4: Hard overrides (raise only)
        tier, overrides = self._apply_overrides(weighted_tier, intake)

        # Step 5: Confidence from factor agreement
        confidence = self._calculate_confidence(factors, tier)

        # Step 6: Red flags against the raw intake
        red_flags = self.detect_red_flags(intake)

        # Step 7: Manual review decision
        definition = self._config.tier_definition(tier)
        needs_manual_review = (
            tier == 4
            or confidence == ConfidenceLevel.LOW
            or bool(red_flags)
            or definition.requires_manual_review
        )

        # Step 8: Alternatives and explanation
        return TierRecommendation(
            tier=tier,
            tier_name=definition.name,
            reason=self._build_reason(factors, tier),
            confidence=confidence,
            needs_manual_review=needs_manual_review,
            factors=factors,
            red_flags=red_flags,
            alternative_tiers=self._alternative_tiers(factors, tier),
            weighted_tier=weighted_tier,
            overrides_applied=overrides,
        )

    # =========================================================================
    # Analysis
    # =========================================================================

    def analyze(self, intake: IntakeData) -> tuple[RoutingFactor, ...]:
        """
        Run the four factor analyzers.

        Returns:
            Factors in canonical order: budget, timeline, project_type, assets
        """
        config = self._config
        return (
            analyze_budget(intake.budget, config),
            analyze_timeline(
                intake.timeline_weeks,
                config,
                budget_tier=config.budget_tier(intake.budget),
            ),
            analyze_project_type(intake.project_type, config),
            analyze_assets(intake.has_survey, intake.has_drawings, config),
        )

    def _calculate_weighted_tier(self, factors: tuple[RoutingFactor, ...]) -> int:
        """Weighted average of suggested tiers, rounded half up and clamped."""
        total_weight = sum(f.weight for f in factors)
        weighted_sum = sum(f.suggested_tier * f.weight for f in factors)
        return clamp_tier(round_half_up(weighted_sum / total_weight))

    # =========================================================================
    # Overrides
    # =========================================================================

    def _apply_overrides(
        self,
        weighted_tier: int,
        intake: IntakeData,
    ) -> tuple[int, tuple[str, ...]]:
        """
        Apply hard floors in fixed order.

        Each rule may only raise the tier. Later rules see the result of
        earlier ones, so the highest floor wins.

        Returns:
            Tuple of (final tier, messages for rules that raised the tier)
        """
        config = self._config
        tier = weighted_tier
        applied: list[str] = []

        # (a) No survey and no drawings: a site visit is unavoidable
        if not intake.has_survey and not intake.has_drawings:
            if tier < config.no_assets_min_tier:
                tier = config.no_assets_min_tier
                applied.append(f"No survey or drawings - raised to Tier {tier}")

        # (b) Project types with a hard minimum tier
        floor = config.project_type_floor(intake.project_type)
        if floor is not None and tier < floor:
            tier = floor
            info = config.project_type_info(intake.project_type)
            label = info.label if info else str(intake.project_type)
            applied.append(f"{label} requires at least Tier {floor}")

        # (c) Numeric budget at or above the Tier 4 threshold
        budget = config.resolve_budget(intake.budget)
        tier_4_min = config.budget_thresholds.tier_4_min
        if budget.has_amount and budget.amount >= tier_4_min and tier < 4:
            tier = 4
            applied.append(f"Budget at or above {format_currency(tier_4_min)} requires Tier 4")

        # (d) Percentage-based pricing
        if budget.kind == BudgetKind.PERCENTAGE and tier < 4:
            tier = 4
            applied.append("Percentage-based pricing requires Tier 4")

        return tier, tuple(applied)

    # =========================================================================
    # Confidence
    # =========================================================================

    def _calculate_confidence(
        self,
        factors: tuple[RoutingFactor, ...],
        tier: int,
    ) -> ConfidenceLevel:
        """
        Confidence from how many factors sit within one tier of the result.

        A contradicted high-importance factor forces LOW. Degraded evidence
        caps the result at MEDIUM.
        """
        high_importance_conflict = any(
            f.weight >= self._config.high_importance_weight
            and abs(f.suggested_tier - tier) >= CONFLICT_DISTANCE
            for f in factors
        )
        if high_importance_conflict:
            return ConfidenceLevel.LOW

        agreement = sum(1 for f in factors if abs(f.suggested_tier - tier) <= AGREEMENT_DISTANCE)
        ratio = agreement / len(factors)

        if ratio >= HIGH_AGREEMENT_RATIO:
            confidence = ConfidenceLevel.HIGH
        elif ratio >= MEDIUM_AGREEMENT_RATIO:
            confidence = ConfidenceLevel.MEDIUM
        else:
            confidence = ConfidenceLevel.LOW

        if confidence == ConfidenceLevel.HIGH and any(f.reduced_confidence for f in factors):
            confidence = ConfidenceLevel.MEDIUM

        return confidence

    # =========================================================================
    # Red Flags
    # =========================================================================

    def detect_red_flags(self, intake: IntakeData) -> tuple[str, ...]:
        """
        Evaluate the red-flag checklist against the raw intake.

        Every matching condition contributes its message; none suppresses
        another. Budget checks are skipped when the budget cannot be placed
        in a bracket, timeline checks when there is no week count.
        """
        config = self._config
        budget = config.resolve_budget(intake.budget)
        budget_tier = config.budget_tier(intake.budget)
        is_fast = config.timeline_category(intake.timeline_weeks) == TimelineCategory.FAST
        project_type = intake.project_type

        flags: list[str] = []

        if budget.has_amount and budget.amount < config.budget_thresholds.tier_1_min:
            flags.append(RED_FLAG_BUDGET_BELOW_MINIMUM)

        if is_fast and config.is_project_type(project_type, config.fast_timeline_risk_types):
            flags.append(RED_FLAG_TIMELINE_UNREALISTIC)

        if not intake.has_survey and not intake.has_drawings and is_fast:
            flags.append(RED_FLAG_NO_ASSETS_FAST)

        if (
            config.is_project_type(project_type, config.budget_sensitive_types)
            and budget_tier is not None
            and budget_tier < config.sensitive_type_min_budget_tier
        ):
            flags.append(RED_FLAG_COMPLEX_LOW_BUDGET)

        if budget_tier is not None and budget_tier >= config.high_budget_tier and is_fast:
            flags.append(RED_FLAG_HIGH_BUDGET_FAST)

        if config.is_project_type(project_type, (config.white_glove_project_type,)):
            flags.append(RED_FLAG_MULTIPLE_PROPERTIES)

        return tuple(flags)

    # =========================================================================
    # Explanation
    # =========================================================================

    def _alternative_tiers(
        self,
        factors: tuple[RoutingFactor, ...],
        tier: int,
    ) -> tuple[int, ...]:
        """Distinct suggested tiers exactly one away from the final tier."""
        return tuple(sorted({f.suggested_tier for f in factors if abs(f.suggested_tier - tier) == 1}))

    def _build_reason(self, factors: tuple[RoutingFactor, ...], tier: int) -> str:
        """Quote the heaviest factors that support the final tier."""
        supporting = sorted(
            (f for f in factors if abs(f.suggested_tier - tier) <= AGREEMENT_DISTANCE),
            key=lambda f: (-f.weight, _CATEGORY_ORDER[f.category]),
        )
        descriptions = [f.description for f in supporting[: self._config.reason_factor_limit]]

        if not descriptions:
            name = self._config.tier_definition(tier).name
            return f"Tier {tier} ({name}) recommended based on weighted analysis of project factors."

        return "; ".join(descriptions) + "."


def recommend_tier(
    intake: IntakeData,
    config: TierConfiguration = DEFAULT_TIER_CONFIGURATION,
) -> TierRecommendation:
    """
    Recommend a service tier for an intake.

    Args:
        intake: Structured intake answers
        config: Rule set to score against

    Returns:
        TierRecommendation

    Raises:
        InvalidInputError: If the intake is structurally incomplete
    """
    return TierRecommendationEngine(config).recommend(intake)
