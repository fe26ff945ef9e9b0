"""
Intake Validation

Structural checks run before scoring. A structurally incomplete intake is
the only condition the engine treats as an error; unknown enumeration values
are left for the analyzers to absorb.
"""

from __future__ import annotations

import math
from typing import Any, Final, Mapping, Union

from core.tier_engine.models import IntakeData


# =============================================================================
# Constants
# =============================================================================

# Fields that must be present before a tier can be recommended
REQUIRED_INTAKE_FIELDS: Final[tuple[str, ...]] = (
    "budget",
    "timeline_weeks",
    "project_type",
    "has_survey",
    "has_drawings",
)

# Field names used by intake forms that map onto IntakeData fields
INTAKE_FIELD_ALIASES: Final[dict[str, str]] = {
    "budgetRange": "budget",
    "budget_range": "budget",
    "timelineWeeks": "timeline_weeks",
    "timeline": "timeline_weeks",
    "projectType": "project_type",
    "hasSurvey": "has_survey",
    "hasDrawings": "has_drawings",
    "projectAddress": "project_address",
}


# =============================================================================
# Errors
# =============================================================================


class InvalidInputError(ValueError):
    """Raised when an intake is structurally incomplete or malformed."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Invalid intake: {'; '.join(self.errors.values())}")

    @property
    def fields(self) -> list[str]:
        return list(self.errors)


# =============================================================================
# Validation Functions
# =============================================================================


def normalise_intake_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map form field names onto IntakeData field names.

    Canonical names win when both spellings are present.
    """
    normalised: dict[str, Any] = {}
    for key, value in data.items():
        if key in INTAKE_FIELD_ALIASES:
            target = INTAKE_FIELD_ALIASES[key]
            if target in normalised:
                continue
            normalised[target] = value
        else:
            normalised[key] = value
    return normalised


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_amount_or_identifier(value: Any, required: str, invalid: str) -> Union[str, None]:
    """Return an error message for a number-or-identifier field, or None."""
    if value is None:
        return required
    if isinstance(value, str):
        return required if not value.strip() else None
    if not _is_number(value):
        return invalid
    if not math.isfinite(value) or value < 0:
        return invalid
    return None


def intake_errors(partial: Union[IntakeData, Mapping[str, Any]]) -> dict[str, str]:
    """
    Collect structural errors for an intake, keyed by field name.

    Args:
        partial: IntakeData or raw mapping (form aliases accepted)

    Returns:
        Ordered mapping of failing field -> human-readable message
    """
    if isinstance(partial, IntakeData):
        data = partial.to_dict()
    else:
        data = normalise_intake_fields(partial)

    errors: dict[str, str] = {}

    budget_error = _check_amount_or_identifier(
        data.get("budget"),
        required="Budget is required",
        invalid="Budget must be a non-negative number or a budget range",
    )
    if budget_error:
        errors["budget"] = budget_error

    timeline_error = _check_amount_or_identifier(
        data.get("timeline_weeks"),
        required="Timeline is required",
        invalid="Timeline must be a non-negative number of weeks or a timeline option",
    )
    if timeline_error:
        errors["timeline_weeks"] = timeline_error

    project_type = data.get("project_type")
    if project_type is None or (isinstance(project_type, str) and not project_type.strip()):
        errors["project_type"] = "Project type is required"
    elif not isinstance(project_type, str):
        errors["project_type"] = "Project type must be a string"

    has_survey = data.get("has_survey")
    if has_survey is None:
        errors["has_survey"] = "Survey status is required"
    elif not isinstance(has_survey, bool):
        errors["has_survey"] = "Survey status must be true or false"

    has_drawings = data.get("has_drawings")
    if has_drawings is None:
        errors["has_drawings"] = "Drawings status is required"
    elif not isinstance(has_drawings, bool):
        errors["has_drawings"] = "Drawings status must be true or false"

    return errors


def validate_intake(partial: Union[IntakeData, Mapping[str, Any]]) -> list[str]:
    """
    Pre-flight check for UI forms.

    Returns:
        Names of missing or invalid fields, empty when the intake is complete
    """
    return list(intake_errors(partial))


def ensure_valid_intake(intake: IntakeData) -> IntakeData:
    """
    Raise InvalidInputError unless the intake is structurally complete.

    Raises:
        InvalidInputError: With every failing field
    """
    errors = intake_errors(intake)
    if errors:
        raise InvalidInputError(errors)
    return intake


# =============================================================================
# Intake Creation
# =============================================================================


def create_intake_data(data: Mapping[str, Any]) -> IntakeData:
    """
    Validate a raw mapping and build IntakeData from it.

    Args:
        data: Raw intake data (snake_case or form field names)

    Returns:
        IntakeData ready for scoring

    Raises:
        InvalidInputError: If required fields are missing or malformed
    """
    normalised = normalise_intake_fields(data)
    errors = intake_errors(normalised)
    if errors:
        raise InvalidInputError(errors)
    return IntakeData.from_dict(normalised)
