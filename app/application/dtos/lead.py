"""Lead DTOs."""

from datetime import datetime
from typing import Any, Optional

from app.application.dtos.base import DTO
from app.domain.entities.lead import Lead
from app.domain.value_objects.lead_status import LeadStatus


class LeadView(DTO):
    """Lead as exposed to callers of the pipeline API."""

    id: str
    organization_id: str
    status: LeadStatus
    company: Optional[str] = None
    key_decision_maker: Optional[str] = None
    next_action: Optional[str] = None
    next_action_due_utc: Optional[datetime] = None
    last_action_utc: Optional[datetime] = None
    outcome: Optional[str] = None
    qualified: Optional[bool] = None
    action_flags: dict[str, Any] = {}

    @classmethod
    def from_entity(cls, lead: Lead) -> "LeadView":
        """
        Build a view from a lead entity.

        Args:
            lead: Lead entity

        Returns:
            LeadView DTO
        """
        return cls(
            id=lead.id,
            organization_id=lead.organization_id,
            status=lead.status,
            company=lead.company,
            key_decision_maker=lead.key_decision_maker,
            next_action=lead.next_action,
            next_action_due_utc=lead.next_action_due_utc,
            last_action_utc=lead.last_action_utc,
            outcome=lead.outcome,
            qualified=lead.qualified,
            action_flags=lead.action_flags(),
        )


class ActionLogResult(DTO):
    """Outcome of recording an outreach action."""

    lead: Lead
    action_recorded: str
