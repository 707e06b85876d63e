"""
Deterministic lead status transition engine.

Every transition has an explicit precondition and explicit side effects.
Advancing a lead applies the requested transition plus any auto-chained
hops inside one unit of work, writing one audit entry per applied hop.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from app.application.dtos.transition import (
    NextSteps,
    PossibleTransition,
    TransitionFailure,
    TransitionRecord,
    TransitionResult,
)
from app.application.ports.unit_of_work import StorageError, UnitOfWork, UnitOfWorkFactory
from app.domain.entities.audit_log_entry import STATUS_CHANGE, AuditLogEntry
from app.domain.entities.lead import Lead
from app.domain.pipeline.auto_chains import next_chained_status
from app.domain.pipeline.transition_map import allowed_targets
from app.domain.pipeline.transition_rules import SideEffects, get_rule, rule_key
from app.domain.value_objects.lead_status import LeadStatus
from app.domain.value_objects.transition_check import TransitionCheck
from app.domain.value_objects.transition_source import TransitionSource
from app.infrastructure.logging.logger import log_transition, log_transition_rejected, logger

# Upper bound on transitions applied by one advance request, chained hops included
MAX_AUTO_CHAIN_STEPS = 3

LEAD_NOT_FOUND = "Lead not found"
STORAGE_FAILURE = "Storage failure while applying transition"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _audit_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class LeadTransitionEngine:
    """Use case for validating and applying lead status transitions."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        max_auto_chain_steps: int = MAX_AUTO_CHAIN_STEPS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize engine.

        Args:
            uow_factory: Creates the unit of work each advance runs in
            max_auto_chain_steps: Safety bound on transitions per advance
            clock: Source of the current UTC time (defaults to the system clock)
        """
        if max_auto_chain_steps < 1:
            raise ValueError("max_auto_chain_steps must be at least 1")
        self._uow_factory = uow_factory
        self._max_auto_chain_steps = max_auto_chain_steps
        self._clock = clock or _utcnow

    def can_transition(self, lead: Lead, target_status: LeadStatus) -> TransitionCheck:
        """
        Check whether a transition is allowed without executing it.

        Args:
            lead: Lead to check
            target_status: Requested status

        Returns:
            Allowed check, or a denial with the adjacency, missing-rule or
            precondition reason
        """
        from_status = lead.status
        if target_status not in allowed_targets(from_status):
            return TransitionCheck.denied(
                f"Transition {from_status.value} → {target_status.value} is not allowed"
            )

        rule = get_rule(from_status, target_status)
        if rule is None:
            return TransitionCheck.denied(
                f"No rule defined for {rule_key(from_status, target_status)}"
            )

        check = rule.precondition(lead, self._clock())
        if not check.allowed:
            return check
        return TransitionCheck.ok()

    def get_next_steps(self, lead: Lead) -> NextSteps:
        """
        Describe every adjacent transition and whether it is currently allowed.

        Args:
            lead: Lead to inspect

        Returns:
            NextSteps with one verdict per adjacent status, in map order
        """
        possible = []
        for target in allowed_targets(lead.status):
            check = self.can_transition(lead, target)
            possible.append(
                PossibleTransition(to_status=target, allowed=check.allowed, reason=check.reason)
            )
        return NextSteps(current_status=lead.status, possible_transitions=possible)

    async def get_lead(self, lead_id: str) -> Optional[Lead]:
        """Read a lead's committed state."""
        async with self._uow_factory() as uow:
            return await uow.leads.get(lead_id)

    async def get_audit_log(self, lead_id: str) -> list[AuditLogEntry]:
        """Read the committed audit trail of a lead, oldest first."""
        async with self._uow_factory() as uow:
            return await uow.audit_log.list_for_lead(lead_id)

    async def get_due_leads(self, organization_id: Optional[str] = None) -> list[Lead]:
        """
        Get waiting leads whose timer has expired.

        Args:
            organization_id: Restrict to one tenant when given

        Returns:
            Leads in WAITING_D2 or WAITING_D1 with next_action_due_utc <= now,
            ascending by next_action_due_utc
        """
        async with self._uow_factory() as uow:
            return await uow.leads.list_due(self._clock(), organization_id)

    async def advance_lead(
        self,
        lead_id: str,
        target_status: Union[LeadStatus, str],
        actor: str,
        source: Union[TransitionSource, str],
    ) -> TransitionResult:
        """
        Advance a lead to the target status.

        The lead row stays locked from the precondition check until commit,
        so a concurrent request for the same lead evaluates against the
        status this call leaves behind.

        Args:
            lead_id: Lead identifier
            target_status: Requested status
            actor: Identity the change is attributed to
            source: Origin of the request

        Returns:
            TransitionResult with the final lead and every applied transition,
            or a failure (not found, rejected, storage error) with no changes
        """
        try:
            target_status = LeadStatus(target_status)
        except ValueError:
            reason = f"Unknown status: {target_status}"
            log_transition_rejected(lead_id, target_status, reason, actor=actor)
            return TransitionResult.failed(TransitionFailure.REJECTED, reason)
        source = TransitionSource(source)

        try:
            async with self._uow_factory() as uow:
                lead = await uow.leads.get(lead_id, for_update=True)
                if lead is None:
                    return TransitionResult.failed(TransitionFailure.NOT_FOUND, LEAD_NOT_FOUND)

                check = self.can_transition(lead, target_status)
                if not check.allowed:
                    log_transition_rejected(lead_id, target_status, check.reason, actor=actor)
                    return TransitionResult.failed(TransitionFailure.REJECTED, check.reason)

                lead, transitions = await self._apply(uow, lead, target_status, actor, source)
                await uow.commit()
        except StorageError as e:
            logger.error(f"Transition of lead {lead_id} to {target_status.value} rolled back: {e}")
            return TransitionResult.failed(TransitionFailure.STORAGE_ERROR, STORAGE_FAILURE)

        for record in transitions:
            log_transition(lead_id, record.from_status, record.to_status, actor, source)

        return TransitionResult(success=True, lead=lead, transitions=transitions)

    async def _apply(
        self,
        uow: UnitOfWork,
        lead: Lead,
        target_status: LeadStatus,
        actor: str,
        source: TransitionSource,
    ) -> tuple[Lead, list[TransitionRecord]]:
        """Apply the requested transition and follow auto-chains."""
        now = self._clock()
        transitions: list[TransitionRecord] = []
        current_target: Optional[LeadStatus] = target_status

        for _ in range(self._max_auto_chain_steps):
            from_status = lead.status
            rule = get_rule(from_status, current_target)
            effects: SideEffects = rule.side_effects(lead, now)

            lead = await uow.leads.update(
                lead.id,
                {"status": current_target, "last_action_utc": now, **effects},
            )
            await uow.audit_log.append(
                AuditLogEntry(
                    lead_id=lead.id,
                    organization_id=lead.organization_id,
                    actor=actor,
                    action=STATUS_CHANGE,
                    before={"status": from_status.value},
                    after={
                        "status": current_target.value,
                        **{name: _audit_value(value) for name, value in effects.items()},
                    },
                    source=source,
                )
            )
            transitions.append(TransitionRecord(from_status=from_status, to_status=current_target))

            current_target = next_chained_status(lead)
            if current_target is None:
                break

        return lead, transitions
