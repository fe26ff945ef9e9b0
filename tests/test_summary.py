"""
Tests for recommendation summaries and tier navigation helpers.
"""

import pytest

from core.tier_engine import (
    LEAD_STATUS_NEEDS_REVIEW,
    LEAD_STATUS_NEW,
    IntakeData,
    can_downgrade_tier,
    can_upgrade_tier,
    derive_lead_status,
    get_tier_summary,
    is_auto_routable,
    recommend_tier,
)


@pytest.fixture
def fast_track_recommendation():
    return recommend_tier(
        IntakeData(
            budget=3000,
            timeline_weeks=2,
            project_type="consultation_only",
            has_survey=True,
            has_drawings=True,
        )
    )


@pytest.fixture
def white_glove_recommendation():
    return recommend_tier(
        IntakeData(
            budget=20000,
            timeline_weeks=6,
            project_type="multiple_properties",
            has_survey=True,
            has_drawings=True,
        )
    )


class TestTierSummary:
    """Human-readable summary text."""

    def test_auto_approved_summary(self, fast_track_recommendation):
        summary = get_tier_summary(fast_track_recommendation)

        assert "Tier 1 - The Concept" in summary
        assert "Confidence: high" in summary
        assert "auto-approved" in summary
        assert f"Reason: {fast_track_recommendation.reason}" in summary
        assert "Red flags" not in summary

    def test_review_summary_lists_red_flags(self, white_glove_recommendation):
        summary = get_tier_summary(white_glove_recommendation)

        assert "Tier 4 - KAA White Glove" in summary
        assert "pending review" in summary
        assert "  - Multiple properties require white-glove service evaluation" in summary


class TestTierNavigation:
    """Upgrade, downgrade and auto-routing checks."""

    @pytest.mark.parametrize("tier,expected", [(1, True), (3, True), (4, False)])
    def test_can_upgrade(self, tier, expected):
        assert can_upgrade_tier(tier) is expected

    @pytest.mark.parametrize("tier,expected", [(1, False), (2, True), (4, True)])
    def test_can_downgrade(self, tier, expected):
        assert can_downgrade_tier(tier) is expected

    @pytest.mark.parametrize("tier,expected", [(1, True), (2, True), (3, False), (4, False)])
    def test_auto_routable(self, tier, expected):
        assert is_auto_routable(tier) is expected


class TestLeadStatus:
    """Derived status persisted by callers."""

    def test_auto_routed_is_new(self, fast_track_recommendation):
        assert derive_lead_status(fast_track_recommendation) == LEAD_STATUS_NEW

    def test_review_required(self, white_glove_recommendation):
        assert derive_lead_status(white_glove_recommendation) == LEAD_STATUS_NEEDS_REVIEW
