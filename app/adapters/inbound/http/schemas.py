"""HTTP adapter schemas for the pipeline API."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from app.application.dtos.lead import LeadView
from app.application.dtos.transition import NextSteps, PossibleTransition, TransitionRecord
from app.domain.value_objects.lead_status import LeadStatus


class AdvanceLeadRequest(BaseModel):
    """Request to move a lead to a target status."""

    target_status: LeadStatus
    actor: str = "api"

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "target_status": "CONTACTED_1",
                "actor": "user:ops@example.com",
            }
        }
    )


class AdvanceLeadResponse(BaseModel):
    """Lead state after an accepted advance request."""

    lead: LeadView
    transitions: list[TransitionRecord]
    message: str


class DueLeadsResponse(BaseModel):
    """Waiting leads whose timer has expired."""

    count: int
    leads: list[LeadView]


class LeadStatusResponse(BaseModel):
    """Current status of a lead and what it can do next."""

    lead_id: str
    company: Optional[str] = None
    current_status: LeadStatus
    possible_transitions: list[PossibleTransition]
    action_flags: dict[str, Any]


class LogActionRequest(BaseModel):
    """Request to record an outreach action."""

    action: str
    actor: str = "api"
    notes: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "action": "send_email_1",
                "actor": "agent:outreach-bot",
                "notes": "Intro email sent from shared inbox",
            }
        }
    )


class LogActionResponse(BaseModel):
    """Lead state after recording an action."""

    lead: LeadView
    action_recorded: str


class CreateLeadRequest(BaseModel):
    """Request to add a lead to the pipeline."""

    organization_id: str
    company: Optional[str] = None
    key_decision_maker: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    mobile_valid: bool = False
    notes: Optional[str] = None
    actor: str = "api"

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "organization_id": "org_1",
                "company": "Acme Ltd",
                "key_decision_maker": "Ada Lovelace",
                "email": "ada@acme.example",
                "mobile": "+15550100",
                "mobile_valid": True,
            }
        }
    )


class LeadResponse(BaseModel):
    """A single lead."""

    lead: LeadView


class LeadDetailResponse(BaseModel):
    """A lead together with its pipeline position."""

    lead: LeadView
    pipeline: NextSteps
