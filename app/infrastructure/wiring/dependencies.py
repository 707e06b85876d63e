"""Dependency injection factory functions."""

from typing import Optional

from app.adapters.outbound.lead.lead_repository import InMemoryLeadStore
from app.adapters.outbound.unit_of_work.in_memory_unit_of_work import InMemoryUnitOfWork
from app.adapters.outbound.unit_of_work.postgres_unit_of_work import PostgresUnitOfWork
from app.application.ports.unit_of_work import UnitOfWorkFactory
from app.application.use_cases.create_lead import CreateLead
from app.application.use_cases.lead_transition_engine import LeadTransitionEngine
from app.application.use_cases.log_lead_action import LogLeadAction
from app.application.use_cases.run_scheduler_tick import RunSchedulerTick
from app.infrastructure.config.settings import settings

# Shared by every in-memory unit of work in the process
_in_memory_store: Optional[InMemoryLeadStore] = None


def get_in_memory_store() -> InMemoryLeadStore:
    """
    Get the process-wide in-memory lead store.

    Returns:
        InMemoryLeadStore instance
    """
    global _in_memory_store
    if _in_memory_store is None:
        _in_memory_store = InMemoryLeadStore()
    return _in_memory_store


def create_unit_of_work_factory() -> UnitOfWorkFactory:
    """
    Factory function to create the unit of work factory.

    Returns:
        Callable producing a fresh UnitOfWork per call
    """
    if settings.lead_repository == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when LEAD_REPOSITORY=postgres")
        return PostgresUnitOfWork

    store = get_in_memory_store()
    return lambda: InMemoryUnitOfWork(store)


def create_transition_engine() -> LeadTransitionEngine:
    """
    Factory function to create the lead transition engine.

    Returns:
        LeadTransitionEngine instance
    """
    return LeadTransitionEngine(
        create_unit_of_work_factory(),
        max_auto_chain_steps=settings.max_auto_chain_steps,
    )


def create_run_scheduler_tick(engine: Optional[LeadTransitionEngine] = None) -> RunSchedulerTick:
    """
    Factory function to create the scheduler tick use case.

    Args:
        engine: Engine to reuse (a new one is created when omitted)

    Returns:
        RunSchedulerTick instance
    """
    return RunSchedulerTick(
        engine or create_transition_engine(),
        concurrency=settings.scheduler_concurrency,
        actor=settings.scheduler_actor,
    )


def create_log_lead_action() -> LogLeadAction:
    """
    Factory function to create the action logging use case.

    Returns:
        LogLeadAction instance
    """
    return LogLeadAction(create_unit_of_work_factory())


def create_create_lead_use_case() -> CreateLead:
    """
    Factory function to create the lead intake use case.

    Returns:
        CreateLead instance
    """
    return CreateLead(create_unit_of_work_factory())
