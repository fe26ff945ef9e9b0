"""
Tests for intake validation

Tests cover:
- Missing required fields
- Malformed values
- Form field aliases
- Intake creation from raw mappings
"""

import math

import pytest

from core.tier_engine import (
    REQUIRED_INTAKE_FIELDS,
    IntakeData,
    InvalidInputError,
    create_intake_data,
    intake_errors,
    validate_intake,
)


@pytest.fixture
def complete_intake_data():
    """Complete intake data dictionary."""
    return {
        "budget": 12000,
        "timeline_weeks": 6,
        "project_type": "addition",
        "has_survey": True,
        "has_drawings": False,
    }


class TestRequiredFields:
    """Pre-flight completeness check."""

    def test_empty_intake_reports_every_field(self):
        assert validate_intake({}) == list(REQUIRED_INTAKE_FIELDS)

    def test_complete_intake_passes(self, complete_intake_data):
        assert validate_intake(complete_intake_data) == []

    def test_false_asset_answers_are_present(self, complete_intake_data):
        """False is an answer, not a missing field."""
        complete_intake_data["has_survey"] = False

        assert validate_intake(complete_intake_data) == []

    def test_zero_budget_is_present(self, complete_intake_data):
        complete_intake_data["budget"] = 0

        assert validate_intake(complete_intake_data) == []

    def test_accepts_intake_data(self, complete_intake_data):
        intake = IntakeData.from_dict(complete_intake_data)

        assert validate_intake(intake) == []

    def test_missing_fields_in_form_order(self, complete_intake_data):
        del complete_intake_data["has_drawings"]
        del complete_intake_data["budget"]

        assert validate_intake(complete_intake_data) == ["budget", "has_drawings"]

    def test_blank_strings_are_missing(self, complete_intake_data):
        complete_intake_data["timeline_weeks"] = ""
        complete_intake_data["project_type"] = "   "

        errors = intake_errors(complete_intake_data)

        assert errors == {
            "timeline_weeks": "Timeline is required",
            "project_type": "Project type is required",
        }


class TestMalformedValues:
    """Values that are present but unusable."""

    @pytest.mark.parametrize("budget", [-1, math.nan, math.inf, True, [5000]])
    def test_invalid_budget(self, complete_intake_data, budget):
        complete_intake_data["budget"] = budget

        errors = intake_errors(complete_intake_data)

        assert errors == {"budget": "Budget must be a non-negative number or a budget range"}

    def test_negative_timeline(self, complete_intake_data):
        complete_intake_data["timeline_weeks"] = -2

        assert validate_intake(complete_intake_data) == ["timeline_weeks"]

    @pytest.mark.parametrize("project_type", [5, ["addition"], True])
    def test_non_string_project_type(self, complete_intake_data, project_type):
        complete_intake_data["project_type"] = project_type

        errors = intake_errors(complete_intake_data)

        assert errors == {"project_type": "Project type must be a string"}

    def test_blank_project_type_is_missing(self, complete_intake_data):
        complete_intake_data["project_type"] = "   "

        assert intake_errors(complete_intake_data) == {"project_type": "Project type is required"}

    def test_non_boolean_asset_answer(self, complete_intake_data):
        complete_intake_data["has_survey"] = "yes"

        errors = intake_errors(complete_intake_data)

        assert errors == {"has_survey": "Survey status must be true or false"}

    def test_unknown_identifiers_are_not_validation_errors(self, complete_intake_data):
        """Unknown enumeration values are absorbed by the analyzers."""
        complete_intake_data["budget"] = "gold_bars"
        complete_intake_data["project_type"] = "treehouse"

        assert validate_intake(complete_intake_data) == []


class TestFieldAliases:
    """Intake form field names."""

    def test_camel_case_form_fields(self):
        data = {
            "budgetRange": "5k_10k",
            "timeline": "asap",
            "projectType": "addition",
            "hasSurvey": True,
            "hasDrawings": False,
        }

        assert validate_intake(data) == []

    @pytest.mark.parametrize(
        "data",
        [
            {"budget": 3000, "budgetRange": "5k_10k"},
            {"budgetRange": "5k_10k", "budget": 3000},
        ],
    )
    def test_canonical_name_wins(self, complete_intake_data, data):
        complete_intake_data.pop("budget")
        complete_intake_data.update(data)

        intake = create_intake_data(complete_intake_data)

        assert intake.budget == 3000


class TestCreateIntakeData:
    """Validated construction from raw mappings."""

    def test_creates_intake(self, complete_intake_data):
        complete_intake_data["name"] = "Jordan Client"

        intake = create_intake_data(complete_intake_data)

        assert isinstance(intake, IntakeData)
        assert intake.budget == 12000
        assert intake.project_type == "addition"
        assert intake.name == "Jordan Client"

    def test_invalid_raises_with_every_error(self):
        with pytest.raises(InvalidInputError) as exc_info:
            create_intake_data({"projectType": "addition"})

        error = exc_info.value
        assert error.fields == ["budget", "timeline_weeks", "has_survey", "has_drawings"]
        assert error.errors["budget"] == "Budget is required"
        assert "Budget is required" in str(error)
        assert isinstance(error, ValueError)
