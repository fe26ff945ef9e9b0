"""
Tier Configuration Table

Single source of truth for tier definitions, budget and timeline thresholds,
project-type routing, asset heuristics and factor weights.

The configuration is read-only after load. Every threshold and weight the
analyzers and the aggregator use is read from a TierConfiguration instance,
so an alternative rule set is validated by passing another instance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Final, Optional

from utils.formatting import format_currency


# =============================================================================
# Enums
# =============================================================================


class TimelineCategory(Enum):
    """Timeline classification against the configured week breakpoints."""

    FAST = "fast"
    STANDARD = "standard"
    EXTENDED = "extended"


class BudgetKind(Enum):
    """How a raw budget value was interpreted."""

    AMOUNT = "amount"  # Numeric amount supplied directly
    RANGE = "range"  # Known range identifier mapped to its midpoint
    PERCENTAGE = "percentage"  # Percentage-of-install pricing
    UNCERTAIN = "uncertain"  # Client answered "not sure"
    UNKNOWN = "unknown"  # Unrecognised identifier


class TimelineKind(Enum):
    """How a raw timeline value was interpreted."""

    WEEKS = "weeks"
    OPTION = "option"
    OPEN = "open"  # Known option with no fixed week count (flexible)
    UNKNOWN = "unknown"


# =============================================================================
# Table Entries
# =============================================================================


@dataclass(frozen=True)
class TierDefinition:
    """Static definition of one service tier."""

    tier: int
    name: str
    tagline: str
    touch_level: str
    auto_route: bool
    requires_manual_review: bool


@dataclass(frozen=True)
class BudgetThresholds:
    """
    Ascending budget breakpoints.

    tier_1_min is the minimum acceptable budget; tier_2_min, tier_3_min and
    tier_4_min are the tier boundaries. An amount equal to a breakpoint
    belongs to the higher bracket.
    """

    tier_1_min: float = 2500
    tier_2_min: float = 7500
    tier_3_min: float = 15000
    tier_4_min: float = 35000

    def __post_init__(self) -> None:
        points = self.breakpoints
        if any(lower >= upper for lower, upper in zip(points, points[1:])):
            raise ValueError(f"Budget thresholds must be strictly ascending: {points}")

    @property
    def breakpoints(self) -> tuple[float, ...]:
        return (self.tier_1_min, self.tier_2_min, self.tier_3_min, self.tier_4_min)

    def tier_for_amount(self, amount: float) -> int:
        """Get the budget bracket tier for an amount."""
        if amount < self.tier_2_min:
            return 1
        if amount < self.tier_3_min:
            return 2
        if amount < self.tier_4_min:
            return 3
        return 4

    def bracket_label(self, tier: int) -> str:
        """Dollar bounds of a tier's budget bracket."""
        bounds = {
            1: (self.tier_1_min, self.tier_2_min),
            2: (self.tier_2_min, self.tier_3_min),
            3: (self.tier_3_min, self.tier_4_min),
        }
        if tier in bounds:
            low, high = bounds[tier]
            return f"{format_currency(low)} - {format_currency(high)}"
        return f"{format_currency(self.tier_4_min)}+"


@dataclass(frozen=True)
class TimelineThresholds:
    """Week breakpoints: fast is below fast_below_weeks, extended above extended_above_weeks."""

    fast_below_weeks: float = 2
    extended_above_weeks: float = 8

    def __post_init__(self) -> None:
        if self.fast_below_weeks > self.extended_above_weeks:
            raise ValueError("fast_below_weeks cannot exceed extended_above_weeks")

    def category_for_weeks(self, weeks: float) -> TimelineCategory:
        if weeks < self.fast_below_weeks:
            return TimelineCategory.FAST
        if weeks <= self.extended_above_weeks:
            return TimelineCategory.STANDARD
        return TimelineCategory.EXTENDED


@dataclass(frozen=True)
class BudgetRange:
    """A budget-range identifier offered on the intake form."""

    value: str
    label: str
    min_amount: float
    max_amount: float

    @property
    def amount(self) -> float:
        """Numeric amount the range stands for (its midpoint)."""
        return (self.min_amount + self.max_amount) / 2

    def spans_tiers(self, thresholds: BudgetThresholds) -> bool:
        """Whether a tier boundary falls strictly inside the range."""
        boundaries = thresholds.breakpoints[1:]
        return any(self.min_amount < b < self.max_amount for b in boundaries)


@dataclass(frozen=True)
class TimelineOption:
    """A timeline identifier offered on the intake form."""

    value: str
    label: str
    weeks: Optional[float]


@dataclass(frozen=True)
class ProjectTypeRouting:
    """Minimum eligible tier and site-visit requirement for a project type."""

    value: str
    label: str
    min_tier: int
    requires_site_visit: bool = False


@dataclass(frozen=True)
class AssetRouting:
    """Suggested tier for one (has_survey, has_drawings) combination."""

    has_survey: bool
    has_drawings: bool
    suggested_tier: int
    weight: float
    description: str


@dataclass(frozen=True)
class FactorWeights:
    """
    Importance weights per factor.

    Reduced weights (roughly one-third of full) apply to degenerate input:
    uncertain or unknown values, and timelines contradicting the budget.
    """

    budget: float = 3
    budget_spanning_range: float = 2
    budget_reduced: float = 1
    timeline: float = 2
    timeline_reduced: float = 1
    project_type: float = 3
    project_type_reduced: float = 1


# =============================================================================
# Resolution Records
# =============================================================================


@dataclass(frozen=True)
class BudgetResolution:
    """A raw budget value normalised against the configuration."""

    kind: BudgetKind
    raw: Any
    amount: Optional[float] = None
    budget_range: Optional[BudgetRange] = None

    @property
    def has_amount(self) -> bool:
        return self.amount is not None


@dataclass(frozen=True)
class TimelineResolution:
    """A raw timeline value normalised against the configuration."""

    kind: TimelineKind
    raw: Any
    weeks: Optional[float] = None
    option: Optional[TimelineOption] = None

    @property
    def label(self) -> str:
        if self.option is not None:
            return self.option.label
        if self.weeks is not None:
            unit = "week" if self.weeks == 1 else "weeks"
            return f"{self.weeks:g} {unit}"
        return str(self.raw)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _normalise_identifier(value: Any) -> str:
    return str(value).lower().strip()


# =============================================================================
# Default Tables
# =============================================================================

DEFAULT_TIER_DEFINITIONS: Final[tuple[TierDefinition, ...]] = (
    TierDefinition(
        tier=1,
        name="The Concept",
        tagline="No-Touch, Fully Automated",
        touch_level="no-touch",
        auto_route=True,
        requires_manual_review=False,
    ),
    TierDefinition(
        tier=2,
        name="The Builder",
        tagline="Low-Touch, Systematized with Checkpoints",
        touch_level="low-touch",
        auto_route=True,
        requires_manual_review=False,
    ),
    TierDefinition(
        tier=3,
        name="The Concierge",
        tagline="Site Visits, Hybrid Tech + Boots on Ground",
        touch_level="hybrid",
        auto_route=False,
        requires_manual_review=False,
    ),
    TierDefinition(
        tier=4,
        name="KAA White Glove",
        tagline="High-Touch, We Choose the Client",
        touch_level="high-touch",
        auto_route=False,
        requires_manual_review=True,
    ),
)

DEFAULT_BUDGET_RANGES: Final[tuple[BudgetRange, ...]] = (
    BudgetRange("under_5k", "Under $5,000", 2500, 5000),
    BudgetRange("5k_10k", "$5,000 - $10,000", 5000, 10000),
    BudgetRange("10k_15k", "$10,000 - $15,000", 10000, 15000),
    BudgetRange("15k_25k", "$15,000 - $25,000", 15000, 25000),
    BudgetRange("25k_35k", "$25,000 - $35,000", 25000, 35000),
    BudgetRange("over_35k", "Over $35,000", 35000, 100000),
    # Lead API ranges
    BudgetRange("under_500", "Under $500", 0, 500),
    BudgetRange("500_2000", "$500 - $2,000", 500, 2000),
    BudgetRange("2000_5000", "$2,000 - $5,000", 2000, 5000),
    BudgetRange("5000_15000", "$5,000 - $15,000", 5000, 15000),
    BudgetRange("15000_50000", "$15,000 - $50,000", 15000, 50000),
    BudgetRange("over_50000", "Over $50,000", 50000, 150000),
)

DEFAULT_TIMELINE_OPTIONS: Final[tuple[TimelineOption, ...]] = (
    TimelineOption("asap", "ASAP (1-2 weeks)", 1),
    TimelineOption("2_4_weeks", "2-4 weeks", 3),
    TimelineOption("fast", "Fast (2-4 weeks)", 3),
    TimelineOption("1_2_months", "1-2 months", 6),
    TimelineOption("standard", "Standard (4-8 weeks)", 6),
    TimelineOption("extended", "Extended (8-12 weeks)", 10),
    TimelineOption("2_4_months", "2-4 months", 12),
    TimelineOption("4_plus_months", "4+ months", 20),
    TimelineOption("flexible", "Flexible", None),
)

DEFAULT_PROJECT_TYPES: Final[tuple[ProjectTypeRouting, ...]] = (
    ProjectTypeRouting("consultation_only", "Consultation Only", 1),
    ProjectTypeRouting("simple_consultation", "Simple Consultation", 1),
    ProjectTypeRouting("simple_renovation", "Simple Renovation", 1),
    ProjectTypeRouting("small_renovation", "Small Renovation", 1),
    ProjectTypeRouting("standard_renovation", "Standard Renovation", 1),
    ProjectTypeRouting("small_addition", "Small Addition", 1),
    ProjectTypeRouting("addition", "Addition", 2),
    ProjectTypeRouting("standard_addition", "Standard Addition", 2),
    ProjectTypeRouting("major_renovation", "Major Renovation", 3, requires_site_visit=True),
    ProjectTypeRouting("new_build", "New Build", 3, requires_site_visit=True),
    ProjectTypeRouting("commercial", "Commercial", 4, requires_site_visit=True),
    ProjectTypeRouting("complex", "Complex Project", 4, requires_site_visit=True),
    ProjectTypeRouting(
        "multiple_properties", "Multiple Properties", 4, requires_site_visit=True
    ),
)

DEFAULT_ASSET_ROUTING: Final[tuple[AssetRouting, ...]] = (
    AssetRouting(
        True, True, 1, 3, "Has survey and drawings - ready for fast-track delivery"
    ),
    AssetRouting(True, False, 2, 2, "Has survey only - some additional work needed"),
    AssetRouting(False, True, 2, 2, "Has drawings only - some additional work needed"),
    AssetRouting(False, False, 3, 3, "No existing assets - site visit required"),
)


# =============================================================================
# Tier Configuration
# =============================================================================


@dataclass(frozen=True)
class TierConfiguration:
    """
    Complete rule set for tier routing.

    Immutable: hot-swapping a rule set means installing a new instance,
    never mutating this one.
    """

    tiers: tuple[TierDefinition, ...] = DEFAULT_TIER_DEFINITIONS
    budget_thresholds: BudgetThresholds = field(default_factory=BudgetThresholds)
    timeline_thresholds: TimelineThresholds = field(default_factory=TimelineThresholds)
    budget_ranges: tuple[BudgetRange, ...] = DEFAULT_BUDGET_RANGES
    timeline_options: tuple[TimelineOption, ...] = DEFAULT_TIMELINE_OPTIONS
    project_types: tuple[ProjectTypeRouting, ...] = DEFAULT_PROJECT_TYPES
    asset_routing: tuple[AssetRouting, ...] = DEFAULT_ASSET_ROUTING
    weights: FactorWeights = field(default_factory=FactorWeights)

    # Budget identifiers with special meaning
    percentage_budget_values: tuple[str, ...] = ("percentage", "percent_of_install")
    uncertain_budget_values: tuple[str, ...] = ("not_sure", "unknown")

    # Factors at or above this weight cannot be contradicted by 2+ tiers
    high_importance_weight: float = 3
    # Factor descriptions quoted in the recommendation reason
    reason_factor_limit: int = 2

    # Hard floors applied after weighting
    no_assets_min_tier: int = 3
    project_type_floors: tuple[tuple[str, int], ...] = (
        ("new_build", 3),
        ("complex", 3),
        ("multiple_properties", 4),
    )

    # Budget tier from which a fast timeline is considered unrealistic
    high_budget_tier: int = 3
    # Budget tier that budget-sensitive project types must reach
    sensitive_type_min_budget_tier: int = 3

    # Red-flag rule sets
    fast_timeline_risk_types: tuple[str, ...] = ("new_build", "complex", "major_renovation")
    budget_sensitive_types: tuple[str, ...] = ("complex", "multiple_properties")
    white_glove_project_type: str = "multiple_properties"

    def __post_init__(self) -> None:
        if sorted(t.tier for t in self.tiers) != [1, 2, 3, 4]:
            raise ValueError("Exactly one definition per tier 1-4 is required")
        combos = {(a.has_survey, a.has_drawings) for a in self.asset_routing}
        if len(combos) != 4 or len(self.asset_routing) != 4:
            raise ValueError("Asset routing must cover all four survey/drawings combinations")
        if self.reason_factor_limit < 1:
            raise ValueError("reason_factor_limit must be at least 1")
        if not 1 <= self.no_assets_min_tier <= 4:
            raise ValueError("no_assets_min_tier must be a tier between 1 and 4")

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def tier_definition(self, tier: int) -> TierDefinition:
        for definition in self.tiers:
            if definition.tier == tier:
                return definition
        raise KeyError(f"Unknown tier: {tier}")

    def is_auto_routable(self, tier: int) -> bool:
        return self.tier_definition(tier).auto_route

    def project_type_info(self, project_type: Any) -> Optional[ProjectTypeRouting]:
        """Get routing info for a project type, case-insensitive."""
        if project_type is None:
            return None
        normalised = _normalise_identifier(project_type)
        for routing in self.project_types:
            if routing.value == normalised:
                return routing
        return None

    def asset_rule(self, has_survey: bool, has_drawings: bool) -> AssetRouting:
        for rule in self.asset_routing:
            if rule.has_survey == bool(has_survey) and rule.has_drawings == bool(has_drawings):
                return rule
        raise KeyError((has_survey, has_drawings))

    def project_type_floor(self, project_type: Any) -> Optional[int]:
        """Minimum tier a project type forces after weighting, if any."""
        if project_type is None:
            return None
        normalised = _normalise_identifier(project_type)
        for value, floor in self.project_type_floors:
            if value == normalised:
                return floor
        return None

    def is_project_type(self, project_type: Any, candidates: tuple[str, ...]) -> bool:
        if project_type is None:
            return False
        return _normalise_identifier(project_type) in candidates

    # -------------------------------------------------------------------------
    # Budget / Timeline Resolution
    # -------------------------------------------------------------------------

    def resolve_budget(self, value: Any) -> BudgetResolution:
        """Interpret a numeric amount or a budget identifier."""
        if _is_number(value):
            return BudgetResolution(kind=BudgetKind.AMOUNT, raw=value, amount=float(value))

        normalised = _normalise_identifier(value)
        if normalised in self.percentage_budget_values:
            return BudgetResolution(kind=BudgetKind.PERCENTAGE, raw=value)
        if normalised in self.uncertain_budget_values:
            return BudgetResolution(kind=BudgetKind.UNCERTAIN, raw=value)
        for budget_range in self.budget_ranges:
            if budget_range.value == normalised:
                return BudgetResolution(
                    kind=BudgetKind.RANGE,
                    raw=value,
                    amount=budget_range.amount,
                    budget_range=budget_range,
                )
        return BudgetResolution(kind=BudgetKind.UNKNOWN, raw=value)

    def budget_tier(self, value: Any) -> Optional[int]:
        """
        Budget bracket tier for a raw budget value.

        Percentage pricing counts as tier 4. Returns None when the budget
        cannot be placed in a bracket.
        """
        resolution = self.resolve_budget(value)
        if resolution.kind == BudgetKind.PERCENTAGE:
            return 4
        if resolution.has_amount:
            return self.budget_thresholds.tier_for_amount(resolution.amount)
        return None

    def resolve_timeline(self, value: Any) -> TimelineResolution:
        """Interpret a week count or a timeline identifier."""
        if _is_number(value):
            return TimelineResolution(kind=TimelineKind.WEEKS, raw=value, weeks=float(value))

        normalised = _normalise_identifier(value)
        for option in self.timeline_options:
            if option.value == normalised:
                if option.weeks is None:
                    return TimelineResolution(kind=TimelineKind.OPEN, raw=value, option=option)
                return TimelineResolution(
                    kind=TimelineKind.OPTION, raw=value, weeks=option.weeks, option=option
                )
        return TimelineResolution(kind=TimelineKind.UNKNOWN, raw=value)

    def timeline_category(self, value: Any) -> Optional[TimelineCategory]:
        """Timeline category for a raw value, or None without a week count."""
        resolution = self.resolve_timeline(value)
        if resolution.weeks is None:
            return None
        return self.timeline_thresholds.category_for_weeks(resolution.weeks)

    # -------------------------------------------------------------------------
    # Overrides
    # -------------------------------------------------------------------------

    def with_overrides(self, overrides: dict[str, Any]) -> "TierConfiguration":
        """
        Build a new configuration with scalar groups replaced.

        Supported keys: budget_thresholds, timeline_thresholds and weights
        (partial dicts merged onto the current values), plus
        high_importance_weight, reason_factor_limit and no_assets_min_tier.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        nested = {
            "budget_thresholds": self.budget_thresholds,
            "timeline_thresholds": self.timeline_thresholds,
            "weights": self.weights,
        }
        scalars = ("high_importance_weight", "reason_factor_limit", "no_assets_min_tier")

        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if key in nested:
                if not isinstance(value, dict):
                    raise ValueError(f"{key} override must be an object")
                current = nested[key]
                allowed = {f.name for f in fields(current)}
                unknown = set(value) - allowed
                if unknown:
                    raise ValueError(f"Unknown {key} fields: {sorted(unknown)}")
                for name, number in value.items():
                    if not _is_number(number) or not math.isfinite(number) or number < 0:
                        raise ValueError(f"{key}.{name} must be a non-negative number")
                    if key == "weights" and number == 0:
                        raise ValueError(f"weights.{name} must be positive")
                changes[key] = replace(current, **value)
            elif key == "high_importance_weight":
                if not _is_number(value) or not math.isfinite(value) or value <= 0:
                    raise ValueError(f"{key} must be a positive number")
                changes[key] = value
            elif key in scalars:
                if not isinstance(value, int) or isinstance(value, bool):
                    raise ValueError(f"{key} must be an integer")
                changes[key] = value
            else:
                raise ValueError(f"Unknown configuration key: {key}")

        return replace(self, **changes)


DEFAULT_TIER_CONFIGURATION: Final = TierConfiguration()
