"""
Recommendation summaries and tier navigation helpers.

Used by the HTTP layer and by reviewers reading a queued lead.
"""

from __future__ import annotations

from typing import Final

from core.tier_engine.config import DEFAULT_TIER_CONFIGURATION, TierConfiguration
from core.tier_engine.models import MAX_TIER, MIN_TIER, TierRecommendation


# Lead status persisted by callers after a recommendation
LEAD_STATUS_NEW: Final = "NEW"
LEAD_STATUS_NEEDS_REVIEW: Final = "NEEDS_REVIEW"


def get_tier_summary(
    recommendation: TierRecommendation,
    config: TierConfiguration = DEFAULT_TIER_CONFIGURATION,
) -> str:
    """
    Human-readable summary of a recommendation.

    Example:
        Recommended: Tier 1 - The Concept (No-Touch, Fully Automated)
        Confidence: high
        Routing: auto-approved

        Reason: Budget ($3,000) fits Tier 1 range ...
    """
    definition = config.tier_definition(recommendation.tier)
    routing = "pending review" if recommendation.needs_manual_review else "auto-approved"

    lines = [
        f"Recommended: Tier {recommendation.tier} - {definition.name} ({definition.tagline})",
        f"Confidence: {recommendation.confidence.value}",
        f"Routing: {routing}",
        "",
        f"Reason: {recommendation.reason}",
    ]

    if recommendation.red_flags:
        lines.append("")
        lines.append("Red flags:")
        lines.extend(f"  - {flag}" for flag in recommendation.red_flags)

    return "\n".join(lines)


def is_auto_routable(
    tier: int,
    config: TierConfiguration = DEFAULT_TIER_CONFIGURATION,
) -> bool:
    """Whether a tier is configured for automatic routing."""
    return config.is_auto_routable(tier)


def can_upgrade_tier(tier: int) -> bool:
    return tier < MAX_TIER


def can_downgrade_tier(tier: int) -> bool:
    return tier > MIN_TIER


def derive_lead_status(recommendation: TierRecommendation) -> str:
    """Lead status for a recommendation: queued for review or new."""
    if recommendation.needs_manual_review:
        return LEAD_STATUS_NEEDS_REVIEW
    return LEAD_STATUS_NEW
