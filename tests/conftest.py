"""Shared fixtures for lead pipeline tests."""

import pytest

from app.adapters.outbound.lead.lead_repository import InMemoryLeadStore
from app.adapters.outbound.unit_of_work.in_memory_unit_of_work import InMemoryUnitOfWork
from app.application.use_cases.lead_transition_engine import LeadTransitionEngine
from app.domain.entities.lead import Lead
from tests.factories import FixedClock


@pytest.fixture
def clock():
    """Create a fixed clock."""
    return FixedClock()


@pytest.fixture
def store():
    """Create an empty in-memory lead store."""
    return InMemoryLeadStore()


@pytest.fixture
def uow_factory(store):
    """Create a unit of work factory over the in-memory store."""
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def engine(uow_factory, clock):
    """Create a transition engine with a fixed clock."""
    return LeadTransitionEngine(uow_factory, clock=clock)


@pytest.fixture
def seed(store):
    """Return a helper that stores leads as already committed."""

    def _seed(*leads: Lead) -> None:
        for lead in leads:
            store.leads[lead.id] = lead

    return _seed
