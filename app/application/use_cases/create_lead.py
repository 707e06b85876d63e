"""Create lead use case."""

from datetime import datetime, timezone
from typing import Callable, Optional, Union

from app.application.ports.unit_of_work import UnitOfWorkFactory
from app.domain.entities.audit_log_entry import LEAD_CREATED, AuditLogEntry
from app.domain.entities.lead import Lead
from app.domain.value_objects.lead_status import LeadStatus
from app.domain.value_objects.transition_source import TransitionSource
from app.infrastructure.logging.logger import log_event

FIRST_OUTREACH = "send_first_outreach"


class CreateLead:
    """
    Use case for lead intake.

    New leads enter the pipeline in NEW with every action flag cleared and
    no pipeline timers running. The intake itself is audited as
    `lead_created`, not as a status change.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def execute(
        self,
        organization_id: str,
        actor: str,
        source: Union[TransitionSource, str],
        company: Optional[str] = None,
        key_decision_maker: Optional[str] = None,
        email: Optional[str] = None,
        mobile: Optional[str] = None,
        mobile_valid: bool = False,
        notes: Optional[str] = None,
    ) -> Lead:
        """
        Create a lead.

        Args:
            organization_id: Tenant owning the lead
            actor: Identity the intake is attributed to
            source: Origin of the request
            company: Company name
            key_decision_maker: Contact person
            email: Contact email
            mobile: Contact mobile number
            mobile_valid: Whether the mobile number can receive voice notes
            notes: Free text notes

        Returns:
            The stored lead
        """
        source = TransitionSource(source)
        now = self._clock()
        lead = Lead(
            organization_id=organization_id,
            status=LeadStatus.NEW,
            company=company,
            key_decision_maker=key_decision_maker,
            email=email,
            mobile=mobile,
            mobile_valid=mobile_valid,
            notes=notes,
            next_action=FIRST_OUTREACH,
            created_at=now,
            updated_at=now,
        )

        async with self._uow_factory() as uow:
            await uow.leads.add(lead)
            await uow.audit_log.append(
                AuditLogEntry(
                    lead_id=lead.id,
                    organization_id=organization_id,
                    actor=actor,
                    action=LEAD_CREATED,
                    before={},
                    after={
                        "company": company,
                        "key_decision_maker": key_decision_maker,
                        "status": LeadStatus.NEW.value,
                    },
                    source=source,
                    created_at=now,
                )
            )
            await uow.commit()

        log_event(lead.id, "intake", organization_id=organization_id, actor=actor)
        return lead
