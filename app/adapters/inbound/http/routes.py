"""HTTP routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, status

from app.adapters.inbound.http.schemas import (
    AdvanceLeadRequest,
    AdvanceLeadResponse,
    CreateLeadRequest,
    DueLeadsResponse,
    LeadDetailResponse,
    LeadResponse,
    LeadStatusResponse,
    LogActionRequest,
    LogActionResponse,
)
from app.application.dtos.lead import LeadView
from app.application.dtos.transition import SchedulerTickResult, TransitionFailure
from app.application.ports.unit_of_work import StorageError
from app.application.use_cases.log_lead_action import (
    ActionAlreadyRecordedError,
    LeadNotFoundError,
    UnknownActionError,
)
from app.domain.entities.lead import Lead
from app.domain.value_objects.transition_source import TransitionSource
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_event
from app.infrastructure.wiring.dependencies import (
    create_create_lead_use_case,
    create_log_lead_action,
    create_run_scheduler_tick,
    create_transition_engine,
)

router = APIRouter()

# Create use case instances (wired with dependencies)
_engine = create_transition_engine()
_run_scheduler_tick = create_run_scheduler_tick(_engine)
_log_lead_action = create_log_lead_action()
_create_lead = create_create_lead_use_case()


async def _load_lead(lead_id: str, organization_id: Optional[str]) -> Lead:
    lead = await _engine.get_lead(lead_id)
    if lead is None or (organization_id is not None and lead.organization_id != organization_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lead not found")
    return lead


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint for liveness/readiness.

    Returns:
        Health status
    """
    return {"status": "ok"}


@router.post("/pipeline/advance/{lead_id}", response_model=AdvanceLeadResponse)
async def advance_lead(
    lead_id: str,
    request: AdvanceLeadRequest,
    organization_id: Optional[str] = None,
) -> AdvanceLeadResponse:
    """
    Advance a lead to a target status.

    Validates the transition, applies side effects and auto-chains, and
    writes audit entries atomically.

    Args:
        lead_id: Lead identifier
        request: Target status and actor
        organization_id: Tenant the lead must belong to

    Returns:
        Final lead state and every applied transition
    """
    lead = await _load_lead(lead_id, organization_id)
    log_event(lead_id, "http", requested_status=request.target_status.value, actor=request.actor)

    result = await _engine.advance_lead(
        lead_id, request.target_status, request.actor, TransitionSource.API
    )

    if not result.success:
        if result.failure == TransitionFailure.NOT_FOUND:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
        if result.failure == TransitionFailure.STORAGE_ERROR:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.error
            )
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Transition rejected",
                "reason": result.error,
                "current_status": lead.status.value,
                "requested_status": request.target_status.value,
            },
        )

    return AdvanceLeadResponse(
        lead=LeadView.from_entity(result.lead),
        transitions=result.transitions,
        message=f"Advanced through {len(result.transitions)} transition(s)",
    )


@router.get("/pipeline/due", response_model=DueLeadsResponse)
async def due_leads(organization_id: Optional[str] = None) -> DueLeadsResponse:
    """
    List leads whose scheduled action is overdue.

    Args:
        organization_id: Restrict to one tenant when given

    Returns:
        Due leads, oldest due first
    """
    leads = await _engine.get_due_leads(organization_id)
    return DueLeadsResponse(count=len(leads), leads=[LeadView.from_entity(lead) for lead in leads])


@router.get("/pipeline/status/{lead_id}", response_model=LeadStatusResponse)
async def lead_status(lead_id: str, organization_id: Optional[str] = None) -> LeadStatusResponse:
    """
    Show the current status of a lead and which transitions are possible.

    Args:
        lead_id: Lead identifier
        organization_id: Tenant the lead must belong to

    Returns:
        Current status, per-target verdicts and action flags
    """
    lead = await _load_lead(lead_id, organization_id)
    steps = _engine.get_next_steps(lead)
    return LeadStatusResponse(
        lead_id=lead.id,
        company=lead.company,
        current_status=steps.current_status,
        possible_transitions=steps.possible_transitions,
        action_flags=lead.action_flags(),
    )


@router.post("/pipeline/scheduler-tick", response_model=SchedulerTickResult)
async def scheduler_tick(organization_id: Optional[str] = None) -> SchedulerTickResult:
    """
    Advance waiting leads whose timer expired.

    Args:
        organization_id: Restrict to one tenant when given

    Returns:
        Per-lead results of the pass
    """
    return await _run_scheduler_tick.execute(organization_id)


@router.post("/leads", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
async def create_lead(request: CreateLeadRequest) -> LeadResponse:
    """
    Add a lead to the pipeline in status NEW.

    Args:
        request: Tenant, contact details and actor

    Returns:
        The created lead
    """
    try:
        lead = await _create_lead.execute(
            request.organization_id,
            request.actor,
            TransitionSource.API,
            company=request.company,
            key_decision_maker=request.key_decision_maker,
            email=request.email,
            mobile=request.mobile,
            mobile_valid=request.mobile_valid,
            notes=request.notes,
        )
    except StorageError as err:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Storage failure while creating lead",
        ) from err

    return LeadResponse(lead=LeadView.from_entity(lead))


@router.get("/leads/{lead_id}", response_model=LeadDetailResponse)
async def get_lead(lead_id: str, organization_id: Optional[str] = None) -> LeadDetailResponse:
    """
    Get a lead with its pipeline position.

    Args:
        lead_id: Lead identifier
        organization_id: Tenant the lead must belong to

    Returns:
        Lead and its possible next transitions
    """
    lead = await _load_lead(lead_id, organization_id)
    return LeadDetailResponse(
        lead=LeadView.from_entity(lead), pipeline=_engine.get_next_steps(lead)
    )


@router.post("/leads/{lead_id}/actions", response_model=LogActionResponse)
async def log_action(
    lead_id: str,
    request: LogActionRequest,
    organization_id: Optional[str] = None,
) -> LogActionResponse:
    """
    Record an outreach action on a lead.

    Args:
        lead_id: Lead identifier
        request: Action name, actor and optional notes
        organization_id: Tenant the lead must belong to

    Returns:
        Updated lead and the recorded action
    """
    await _load_lead(lead_id, organization_id)
    try:
        result = await _log_lead_action.execute(
            lead_id, request.action, request.actor, TransitionSource.API, notes=request.notes
        )
    except UnknownActionError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    except LeadNotFoundError as err:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lead not found") from err
    except ActionAlreadyRecordedError as err:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(err)) from err
    except StorageError as err:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Storage failure while recording action",
        ) from err

    return LogActionResponse(
        lead=LeadView.from_entity(result.lead), action_recorded=result.action_recorded
    )


@router.get("/debug/leads/{lead_id}/audit", status_code=status.HTTP_200_OK)
async def get_lead_audit_debug(lead_id: str) -> dict:
    """
    Get the audit trail of a lead (only enabled if DEBUG_MODE=true).

    Args:
        lead_id: Lead identifier

    Returns:
        Audit entries, oldest first

    Raises:
        HTTPException: 404 if DEBUG_MODE is disabled
    """
    if not settings.debug_mode:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Debug endpoint is disabled",
        )

    entries = await _engine.get_audit_log(lead_id)
    return {
        "lead_id": lead_id,
        "entries": [
            {
                "id": entry.id,
                "actor": entry.actor,
                "action": entry.action,
                "before": entry.before,
                "after": entry.after,
                "source": entry.source.value,
                "created_at": entry.created_at.isoformat(),
            }
            for entry in entries
        ],
    }
