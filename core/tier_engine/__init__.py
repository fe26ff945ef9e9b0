"""
Tier Recommendation Engine v1.0

Routes a prospective client's intake answers to one of four service tiers.

Pipeline:
1. Validation (structural completeness)
2. Factor analysis (budget, timeline, project type, assets)
3. Weighted tier with hard overrides
4. Confidence, red flags and manual-review decision
"""

from .models import (
    MIN_TIER,
    MAX_TIER,
    FactorCategory,
    ConfidenceLevel,
    IntakeData,
    RoutingFactor,
    TierRecommendation,
)
from .config import (
    TimelineCategory,
    BudgetKind,
    TimelineKind,
    TierDefinition,
    BudgetThresholds,
    TimelineThresholds,
    BudgetRange,
    TimelineOption,
    ProjectTypeRouting,
    AssetRouting,
    FactorWeights,
    TierConfiguration,
    DEFAULT_TIER_CONFIGURATION,
)
from .analyzers import (
    analyze_budget,
    analyze_timeline,
    analyze_project_type,
    analyze_assets,
)
from .validation import (
    REQUIRED_INTAKE_FIELDS,
    InvalidInputError,
    validate_intake,
    intake_errors,
    ensure_valid_intake,
    create_intake_data,
)
from .engine import (
    RED_FLAG_MESSAGES,
    TierRecommendationEngine,
    recommend_tier,
)
from .summary import (
    LEAD_STATUS_NEW,
    LEAD_STATUS_NEEDS_REVIEW,
    get_tier_summary,
    is_auto_routable,
    can_upgrade_tier,
    can_downgrade_tier,
    derive_lead_status,
)

__version__ = "1.0.0"

__all__ = [
    # Models
    "MIN_TIER",
    "MAX_TIER",
    "FactorCategory",
    "ConfidenceLevel",
    "IntakeData",
    "RoutingFactor",
    "TierRecommendation",
    # Configuration
    "TimelineCategory",
    "BudgetKind",
    "TimelineKind",
    "TierDefinition",
    "BudgetThresholds",
    "TimelineThresholds",
    "BudgetRange",
    "TimelineOption",
    "ProjectTypeRouting",
    "AssetRouting",
    "FactorWeights",
    "TierConfiguration",
    "DEFAULT_TIER_CONFIGURATION",
    # Analyzers
    "analyze_budget",
    "analyze_timeline",
    "analyze_project_type",
    "analyze_assets",
    # Validation
    "REQUIRED_INTAKE_FIELDS",
    "InvalidInputError",
    "validate_intake",
    "intake_errors",
    "ensure_valid_intake",
    "create_intake_data",
    # Engine
    "RED_FLAG_MESSAGES",
    "TierRecommendationEngine",
    "recommend_tier",
    # Summary
    "LEAD_STATUS_NEW",
    "LEAD_STATUS_NEEDS_REVIEW",
    "get_tier_summary",
    "is_auto_routable",
    "can_upgrade_tier",
    "can_downgrade_tier",
    "derive_lead_status",
]
