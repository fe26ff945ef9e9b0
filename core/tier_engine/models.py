"""
Data models for the Tier Recommendation Engine.

Defines the intake input, the per-factor evidence produced by the analyzers
and the final recommendation returned to callers. All models are frozen:
the engine never mutates its input and callers own the output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Optional, Union


# =============================================================================
# Tier Range
# =============================================================================

MIN_TIER: Final = 1
MAX_TIER: Final = 4

# Budget and timeline accept either a number or an enumerated identifier
BudgetValue = Union[int, float, str]
TimelineValue = Union[int, float, str]


def clamp_tier(tier: int) -> int:
    """Clamp a tier number to the closed range [1, 4]."""
    return max(MIN_TIER, min(MAX_TIER, tier))


# =============================================================================
# Enums
# =============================================================================


class FactorCategory(Enum):
    """
    Dimension of evidence contributing to a tier decision.

    Declaration order is the canonical factor order of a recommendation.
    """

    BUDGET = "budget"
    TIMELINE = "timeline"
    PROJECT_TYPE = "project_type"
    ASSETS = "assets"


class ConfidenceLevel(Enum):
    """
    How strongly the factors agree with the final tier.

    High: >= 75% of factors within one tier of the result
    Medium: >= 50% of factors within one tier
    Low: anything less, or a high-importance factor contradicted by 2+ tiers
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# Intake
# =============================================================================


@dataclass(frozen=True)
class IntakeData:
    """
    Structured answers a prospective client supplies before a tier is assigned.

    Constructed by the calling layer per request. Structural validation
    happens in the engine entry point, not here, so that pre-flight checks
    can report every missing field at once.
    """

    budget: Optional[BudgetValue]
    timeline_weeks: Optional[TimelineValue]
    project_type: Optional[str]
    has_survey: Optional[bool]
    has_drawings: Optional[bool]

    # Pass-through fields for traceability, never scored
    project_address: str = ""
    email: str = ""
    name: str = ""

    def to_dict(self) -> dict:
        """Convert intake to dictionary for serialisation."""
        return {
            "budget": self.budget,
            "timeline_weeks": self.timeline_weeks,
            "project_type": self.project_type,
            "has_survey": self.has_survey,
            "has_drawings": self.has_drawings,
            "project_address": self.project_address,
            "email": self.email,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntakeData":
        """Create IntakeData from a dictionary of snake_case fields."""
        return cls(
            budget=data.get("budget"),
            timeline_weeks=data.get("timeline_weeks"),
            project_type=data.get("project_type"),
            has_survey=data.get("has_survey"),
            has_drawings=data.get("has_drawings"),
            project_address=data.get("project_address") or "",
            email=data.get("email") or "",
            name=data.get("name") or "",
        )


# =============================================================================
# Routing Factor
# =============================================================================


@dataclass(frozen=True)
class RoutingFactor:
    """
    One analyzer's verdict on a single dimension of the intake.

    reduced_confidence marks degraded evidence (an unknown value, or a
    timeline that contradicts the budget). It caps overall confidence.
    """

    category: FactorCategory
    suggested_tier: int
    weight: float
    description: str
    reduced_confidence: bool = False

    def __post_init__(self) -> None:
        if not MIN_TIER <= self.suggested_tier <= MAX_TIER:
            raise ValueError(f"suggested_tier out of range: {self.suggested_tier}")
        if self.weight <= 0:
            raise ValueError("weight must be positive")

    def to_dict(self) -> dict:
        """Convert factor to dictionary."""
        return {
            "category": self.category.value,
            "suggested_tier": self.suggested_tier,
            "weight": self.weight,
            "description": self.description,
            "reduced_confidence": self.reduced_confidence,
        }


# =============================================================================
# Recommendation
# =============================================================================


@dataclass(frozen=True)
class TierRecommendation:
    """
    Complete tier recommendation for one intake.

    Ownership transfers to the caller, which decides from
    needs_manual_review whether the record is auto-routed or queued for a
    human.
    """

    tier: int
    tier_name: str
    reason: str
    confidence: ConfidenceLevel
    needs_manual_review: bool
    factors: tuple[RoutingFactor, ...]
    red_flags: tuple[str, ...] = ()
    alternative_tiers: tuple[int, ...] = ()

    # Audit trail of the decision
    weighted_tier: int = 0
    overrides_applied: tuple[str, ...] = field(default_factory=tuple)

    def factor(self, category: FactorCategory) -> RoutingFactor:
        """Get the factor produced for a category."""
        for item in self.factors:
            if item.category == category:
                return item
        raise KeyError(category.value)

    @property
    def is_auto_routed(self) -> bool:
        """Whether the recommendation can proceed without a human."""
        return not self.needs_manual_review

    def to_dict(self) -> dict:
        """Convert recommendation to dictionary for JSON output."""
        return {
            "tier": self.tier,
            "tier_name": self.tier_name,
            "reason": self.reason,
            "confidence": self.confidence.value,
            "needs_manual_review": self.needs_manual_review,
            "factors": [f.to_dict() for f in self.factors],
            "red_flags": list(self.red_flags),
            "alternative_tiers": list(self.alternative_tiers),
            "weighted_tier": self.weighted_tier,
            "overrides_applied": list(self.overrides_applied),
        }
