"""Transition engine DTOs."""

from enum import Enum
from typing import Optional

from app.application.dtos.base import DTO
from app.domain.entities.lead import Lead
from app.domain.value_objects.lead_status import LeadStatus


class TransitionFailure(str, Enum):
    """Why an advance request did not apply."""

    NOT_FOUND = "not_found"
    REJECTED = "rejected"
    STORAGE_ERROR = "storage_error"


class TransitionRecord(DTO):
    """One status change applied to a lead."""

    from_status: LeadStatus
    to_status: LeadStatus


class TransitionResult(DTO):
    """Outcome of an advance request, including auto-chained hops."""

    success: bool
    lead: Optional[Lead] = None
    transitions: list[TransitionRecord] = []
    error: Optional[str] = None
    failure: Optional[TransitionFailure] = None

    @classmethod
    def failed(cls, failure: TransitionFailure, error: str) -> "TransitionResult":
        return cls(success=False, failure=failure, error=error)


class PossibleTransition(DTO):
    """Whether a lead may currently move to one adjacent status."""

    to_status: LeadStatus
    allowed: bool
    reason: Optional[str] = None


class NextSteps(DTO):
    """Adjacent transitions of a lead with their current verdict."""

    current_status: LeadStatus
    possible_transitions: list[PossibleTransition]


class SchedulerTickItem(DTO):
    """Result of advancing one due lead."""

    lead_id: str
    from_status: LeadStatus
    to_status: LeadStatus
    success: bool
    error: Optional[str] = None


class SchedulerTickResult(DTO):
    """Result of one scheduler pass over the due leads."""

    processed: int
    results: list[SchedulerTickItem]

    @property
    def succeeded(self) -> int:
        return sum(1 for item in self.results if item.success)
