"""
Tests for the tier routing HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from core.tier_engine import DEFAULT_TIER_CONFIGURATION
from utils.config import install_tier_configuration
from web.app import create_app


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("TIER_CONFIG_PATH", raising=False)
    install_tier_configuration(None)
    with TestClient(create_app()) as test_client:
        yield test_client
    install_tier_configuration(None)


@pytest.fixture
def fast_track_payload():
    return {
        "budget": 3000,
        "timeline_weeks": 2,
        "project_type": "consultation_only",
        "has_survey": True,
        "has_drawings": True,
    }


class TestHealth:
    """Health endpoints."""

    def test_root(self, client):
        assert client.get("/").json() == {"status": "ok"}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_api_health(self, client):
        data = client.get("/api/health").json()

        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"


class TestTierDefinitions:
    """Tier listing endpoints."""

    def test_list_tiers(self, client):
        response = client.get("/api/tiers")

        assert response.status_code == 200
        tiers = response.json()["tiers"]
        assert [t["tier"] for t in tiers] == [1, 2, 3, 4]
        assert tiers[0]["name"] == "The Concept"
        assert tiers[3]["requires_manual_review"] is True

    def test_get_tier(self, client):
        response = client.get("/api/tiers/3")

        assert response.status_code == 200
        assert response.json()["name"] == "The Concierge"

    def test_unknown_tier(self, client):
        assert client.get("/api/tiers/9").status_code == 404


class TestValidateEndpoint:
    """Pre-flight validation."""

    def test_incomplete(self, client):
        response = client.post("/api/tiers/validate", json={"budget": 5000})

        data = response.json()
        assert response.status_code == 200
        assert data["valid"] is False
        assert data["missing_fields"] == ["timeline_weeks", "project_type", "has_survey", "has_drawings"]
        assert "Project type is required" in data["errors"]

    def test_complete(self, client, fast_track_payload):
        data = client.post("/api/tiers/validate", json=fast_track_payload).json()

        assert data == {"valid": True, "missing_fields": [], "errors": []}


class TestRecommendEndpoint:
    """Tier recommendation."""

    def test_fast_track(self, client, fast_track_payload):
        response = client.post("/api/tiers/recommend", json=fast_track_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["status"] == "NEW"
        assert data["recommendation"]["tier"] == 1
        assert data["recommendation"]["confidence"] == "high"
        assert data["recommendation"]["red_flags"] == []
        assert "Tier 1 - The Concept" in data["summary"]

    def test_multiple_properties_needs_review(self, client, fast_track_payload):
        fast_track_payload["project_type"] = "multiple_properties"

        data = client.post("/api/tiers/recommend", json=fast_track_payload).json()

        assert data["status"] == "NEEDS_REVIEW"
        assert data["recommendation"]["tier"] == 4
        assert data["recommendation"]["needs_manual_review"] is True

    def test_budget_identifier(self, client, fast_track_payload):
        fast_track_payload["budget"] = "not_sure"

        data = client.post("/api/tiers/recommend", json=fast_track_payload).json()

        budget_factor = data["recommendation"]["factors"][0]
        assert budget_factor["category"] == "budget"
        assert budget_factor["reduced_confidence"] is True

    def test_camel_case_form_fields(self, client):
        """The intake form's field names are accepted alongside snake_case."""
        payload = {
            "budgetRange": "5k_10k",
            "timeline": "asap",
            "projectType": "addition",
            "hasSurvey": True,
            "hasDrawings": True,
        }

        response = client.post("/api/tiers/recommend", json=payload)

        assert response.status_code == 200
        factors = response.json()["recommendation"]["factors"]
        assert factors[0]["suggested_tier"] == 2
        assert "ASAP (1-2 weeks)" in factors[1]["description"]
        assert factors[2]["reduced_confidence"] is False

    def test_camel_case_validation(self, client):
        data = client.post(
            "/api/tiers/validate",
            json={"budgetRange": "over_50000", "timelineWeeks": 4, "projectType": "addition"},
        ).json()

        assert data["missing_fields"] == ["has_survey", "has_drawings"]

    def test_incomplete_intake_rejected(self, client):
        response = client.post("/api/tiers/recommend", json={"project_type": "addition"})

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["missing_fields"] == ["budget", "timeline_weeks", "has_survey", "has_drawings"]
        assert "Budget is required" in data["errors"]

    def test_uses_installed_configuration(self, client, fast_track_payload):
        install_tier_configuration(
            DEFAULT_TIER_CONFIGURATION.with_overrides({"reason_factor_limit": 1})
        )

        data = client.post("/api/tiers/recommend", json=fast_track_payload).json()

        assert data["recommendation"]["reason"] == (
            "Budget ($3,000) fits Tier 1 range ($2,500 - $7,500)."
        )
