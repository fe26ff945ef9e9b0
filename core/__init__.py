"""
Intake Tier Router - Core Business Logic

This module provides the tier routing pipeline:
1. Intake Validation (structural completeness)
2. Factor Analysis (budget, timeline, project type, assets)
3. Weighted Tier + Hard Overrides
4. Confidence Gating and Red Flags
5. Output: tier, reason, review decision
"""

from .tier_engine import (
    FactorCategory,
    ConfidenceLevel,
    IntakeData,
    RoutingFactor,
    TierRecommendation,
    TierDefinition,
    TierConfiguration,
    DEFAULT_TIER_CONFIGURATION,
    InvalidInputError,
    validate_intake,
    create_intake_data,
    TierRecommendationEngine,
    recommend_tier,
    get_tier_summary,
    derive_lead_status,
)

__all__ = [
    "FactorCategory",
    "ConfidenceLevel",
    "IntakeData",
    "RoutingFactor",
    "TierRecommendation",
    "TierDefinition",
    "TierConfiguration",
    "DEFAULT_TIER_CONFIGURATION",
    "InvalidInputError",
    "validate_intake",
    "create_intake_data",
    "TierRecommendationEngine",
    "recommend_tier",
    "get_tier_summary",
    "derive_lead_status",
]
