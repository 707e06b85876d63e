"""Lead repository port."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from app.domain.entities.lead import Lead


class LeadRepository(ABC):
    """Port interface for lead repository."""

    @abstractmethod
    async def get(self, lead_id: str, for_update: bool = False) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier
            for_update: Lock the lead until the unit of work ends

        Returns:
            Lead entity, or None if not found
        """
        pass

    @abstractmethod
    async def add(self, lead: Lead) -> None:
        """
        Add a new lead.

        Args:
            lead: Lead entity to add
        """
        pass

    @abstractmethod
    async def update(self, lead_id: str, fields: dict[str, Any]) -> Lead:
        """
        Apply a partial update to a lead.

        Args:
            lead_id: Lead identifier
            fields: Field name to new value; other fields are left unchanged

        Returns:
            The updated lead
        """
        pass

    @abstractmethod
    async def list_due(self, now: datetime, organization_id: Optional[str] = None) -> list[Lead]:
        """
        List waiting leads whose next action is due.

        Args:
            now: Reference time
            organization_id: Restrict to one tenant when given

        Returns:
            Leads in a waiting status with next_action_due_utc <= now,
            ascending by next_action_due_utc
        """
        pass
