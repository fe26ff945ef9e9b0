"""
Tier Routing Routes - Web API for Intake Tier Recommendations

Thin HTTP layer over the tier engine. Each request reads the active rule
set once and scores against that snapshot; nothing is persisted here.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from core.tier_engine import (
    InvalidInputError,
    create_intake_data,
    derive_lead_status,
    get_tier_summary,
    intake_errors,
    recommend_tier,
)
from core.tier_engine.validation import INTAKE_FIELD_ALIASES
from utils.config import get_tier_configuration

logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(prefix="/api/tiers", tags=["tiers"])


def _aliases(field_name: str) -> AliasChoices:
    """Accept the field name plus every form spelling that maps onto it."""
    names = [alias for alias, target in INTAKE_FIELD_ALIASES.items() if target == field_name]
    return AliasChoices(field_name, *names)


class IntakeRequest(BaseModel):
    """Intake answers as posted by the intake form (snake_case or camelCase)."""

    budget: Optional[Union[int, float, str]] = Field(None, validation_alias=_aliases("budget"))
    timeline_weeks: Optional[Union[int, float, str]] = Field(
        None, validation_alias=_aliases("timeline_weeks")
    )
    project_type: Optional[str] = Field(None, validation_alias=_aliases("project_type"))
    has_survey: Optional[bool] = Field(None, validation_alias=_aliases("has_survey"))
    has_drawings: Optional[bool] = Field(None, validation_alias=_aliases("has_drawings"))
    project_address: Optional[str] = Field(None, validation_alias=_aliases("project_address"))
    email: Optional[str] = None
    name: Optional[str] = None


def _tier_to_dict(definition) -> dict:
    return {
        "tier": definition.tier,
        "name": definition.name,
        "tagline": definition.tagline,
        "touch_level": definition.touch_level,
        "auto_route": definition.auto_route,
        "requires_manual_review": definition.requires_manual_review,
    }


# =============================================================================
# Tier Definitions
# =============================================================================


@router.get("")
def list_tiers():
    """List the configured service tiers."""
    config = get_tier_configuration()
    return {"tiers": [_tier_to_dict(t) for t in sorted(config.tiers, key=lambda t: t.tier)]}


@router.get("/{tier}")
def get_tier(tier: int):
    """Get one tier definition."""
    config = get_tier_configuration()
    try:
        definition = config.tier_definition(tier)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Tier {tier} not found")
    return _tier_to_dict(definition)


# =============================================================================
# Intake Validation & Recommendation
# =============================================================================


@router.post("/validate")
def validate_intake_endpoint(request_data: IntakeRequest):
    """
    Pre-flight check for the intake form.

    Returns:
        - valid: whether the intake can be scored
        - missing_fields: failing field names in form order
        - errors: human-readable messages
    """
    errors = intake_errors(request_data.model_dump())
    return {
        "valid": not errors,
        "missing_fields": list(errors),
        "errors": list(errors.values()),
    }


@router.post("/recommend")
def recommend_endpoint(request_data: IntakeRequest):
    """
    Recommend a service tier for an intake.

    Returns:
        - 200 with the recommendation, a text summary and the lead status
        - 400 with failing fields if the intake is incomplete
    """
    try:
        intake = create_intake_data(request_data.model_dump())
    except InvalidInputError as e:
        logger.warning("Rejected intake: missing or invalid %s", ", ".join(e.fields))
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "missing_fields": e.fields,
                "errors": list(e.errors.values()),
            },
        )

    config = get_tier_configuration()
    recommendation = recommend_tier(intake, config)

    logger.info(
        "Recommended tier %d (%s confidence, review=%s) for %s",
        recommendation.tier,
        recommendation.confidence.value,
        recommendation.needs_manual_review,
        intake.project_type,
    )

    return {
        "success": True,
        "recommendation": recommendation.to_dict(),
        "summary": get_tier_summary(recommendation, config),
        "status": derive_lead_status(recommendation),
    }
