"""Run scheduler tick use case."""

import asyncio
from typing import Optional

from app.application.dtos.transition import SchedulerTickItem, SchedulerTickResult
from app.application.use_cases.lead_transition_engine import LeadTransitionEngine
from app.domain.entities.lead import Lead
from app.domain.pipeline.transition_map import SCHEDULED_TARGETS
from app.domain.value_objects.transition_source import TransitionSource
from app.infrastructure.logging.logger import log_scheduler_tick, logger


class RunSchedulerTick:
    """Advance every waiting lead whose timer has expired."""

    def __init__(
        self,
        engine: LeadTransitionEngine,
        concurrency: int = 1,
        actor: str = "system",
    ) -> None:
        """
        Initialize use case.

        Args:
            engine: Transition engine used to advance each lead
            concurrency: Maximum leads advanced at the same time
            actor: Identity recorded in the audit log
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._engine = engine
        self._concurrency = concurrency
        self._actor = actor

    async def execute(self, organization_id: Optional[str] = None) -> SchedulerTickResult:
        """
        Run one pass over the due leads.

        A denied or failing lead is recorded and never stops the rest of the
        batch. Results follow the due-list order.

        Args:
            organization_id: Restrict to one tenant when given

        Returns:
            Per-lead results of the pass
        """
        due_leads = await self._engine.get_due_leads(organization_id)
        semaphore = asyncio.Semaphore(self._concurrency)

        async def advance(lead: Lead) -> SchedulerTickItem:
            target_status = SCHEDULED_TARGETS[lead.status]
            async with semaphore:
                try:
                    result = await self._engine.advance_lead(
                        lead.id, target_status, self._actor, TransitionSource.SCHEDULER
                    )
                except Exception as e:
                    logger.exception(f"Scheduler failed to advance lead {lead.id}: {e}")
                    return SchedulerTickItem(
                        lead_id=lead.id,
                        from_status=lead.status,
                        to_status=target_status,
                        success=False,
                        error=str(e),
                    )
            return SchedulerTickItem(
                lead_id=lead.id,
                from_status=lead.status,
                to_status=target_status,
                success=result.success,
                error=result.error,
            )

        results = await asyncio.gather(
            *(advance(lead) for lead in due_leads if lead.status in SCHEDULED_TARGETS)
        )
        tick = SchedulerTickResult(processed=len(results), results=list(results))
        log_scheduler_tick(tick.processed, tick.succeeded, organization_id)
        return tick
