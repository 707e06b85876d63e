"""Log lead action use case."""

from datetime import datetime, timezone
from typing import Callable, Optional, Union

from app.application.dtos.lead import ActionLogResult
from app.application.ports.unit_of_work import UnitOfWorkFactory
from app.domain.entities.audit_log_entry import ACTION_LOGGED, AuditLogEntry
from app.domain.pipeline.action_flags import ACTION_FLAG_MAP, MARK_REPLIED
from app.domain.value_objects.transition_source import TransitionSource
from app.infrastructure.logging.logger import log_event


class LeadNotFoundError(LookupError):
    """Raised when the lead does not exist."""


class UnknownActionError(ValueError):
    """Raised for an action name outside the action flag map."""


class ActionAlreadyRecordedError(ValueError):
    """Raised when the action's flag is already set."""


class LogLeadAction:
    """
    Use case for recording an outreach action on a lead.

    Sets the flag the action maps to (or the reply timestamp for
    mark_replied). It never changes the lead's status or its
    last_action_utc; advancing is left to the transition engine.
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
        lead_id: str,
        action: str,
        actor: str,
        source: Union[TransitionSource, str],
        notes: Optional[str] = None,
    ) -> ActionLogResult:
        """
        Record an action.

        Args:
            lead_id: Lead identifier
            action: Action name (key of ACTION_FLAG_MAP)
            actor: Identity the action is attributed to
            source: Origin of the request
            notes: Free text appended to the lead's notes

        Returns:
            The updated lead and the recorded action

        Raises:
            UnknownActionError: If the action is not in the action flag map
            LeadNotFoundError: If the lead does not exist
            ActionAlreadyRecordedError: If the flag is already set
        """
        source = TransitionSource(source)
        field_name = ACTION_FLAG_MAP.get(action)
        if field_name is None:
            raise UnknownActionError(f"Unknown action: {action}")

        now = self._clock()
        async with self._uow_factory() as uow:
            existing = await uow.leads.get(lead_id, for_update=True)
            if existing is None:
                raise LeadNotFoundError(f"Lead {lead_id} not found")

            previous = getattr(existing, field_name)
            if action == MARK_REPLIED:
                if previous is not None:
                    raise ActionAlreadyRecordedError("Already replied")
                value = now
            else:
                if previous is True:
                    raise ActionAlreadyRecordedError(f"{action} already recorded")
                value = True

            fields = {field_name: value}
            if notes:
                line = f"[{now.isoformat()}] {source.value}:{action}: {notes}"
                fields["notes"] = f"{existing.notes}\n{line}" if existing.notes else line

            lead = await uow.leads.update(lead_id, fields)
            await uow.audit_log.append(
                AuditLogEntry(
                    lead_id=lead_id,
                    organization_id=lead.organization_id,
                    actor=actor,
                    action=ACTION_LOGGED,
                    before={field_name: previous},
                    after={
                        field_name: value.isoformat() if isinstance(value, datetime) else value,
                        "action": action,
                    },
                    source=source,
                )
            )
            await uow.commit()

        log_event(lead_id, "actions", action=action, actor=actor, source=source.value)
        return ActionLogResult(lead=lead, action_recorded=action)
