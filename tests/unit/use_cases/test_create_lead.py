"""Unit tests for CreateLead use case."""

import pytest

from app.adapters.outbound.unit_of_work.in_memory_unit_of_work import InMemoryUnitOfWork
from app.application.ports.unit_of_work import StorageError
from app.application.use_cases.create_lead import CreateLead
from app.domain.entities.audit_log_entry import LEAD_CREATED
from app.domain.value_objects.lead_status import LeadStatus as S
from app.domain.value_objects.transition_source import TransitionSource
from tests.factories import NOW


@pytest.fixture
def create_lead(uow_factory, clock):
    """Create CreateLead with a fixed clock."""
    return CreateLead(uow_factory, clock=clock)


@pytest.mark.asyncio
async def test_new_lead_enters_pipeline_at_start(create_lead, store):
    lead = await create_lead.execute(
        "org_1", "agent:intake", "agent", company="Initech", email="bill@initech.example"
    )

    stored = store.leads[lead.id]
    assert stored.status == S.NEW
    assert stored.company == "Initech"
    assert stored.email == "bill@initech.example"
    assert stored.next_action == "send_first_outreach"
    assert stored.next_action_due_utc is None
    assert stored.last_action_utc is None
    assert stored.created_at == NOW
    assert not any(value for value in stored.action_flags().values())


@pytest.mark.asyncio
async def test_intake_is_audited_as_lead_created(create_lead, store):
    lead = await create_lead.execute("org_1", "agent:intake", "agent", company="Initech")

    assert len(store.audit_entries) == 1
    entry = store.audit_entries[0]
    assert entry.lead_id == lead.id
    assert entry.action == LEAD_CREATED
    assert entry.source == TransitionSource.AGENT
    assert entry.before == {}
    assert entry.after == {"company": "Initech", "key_decision_maker": None, "status": "NEW"}


@pytest.mark.asyncio
async def test_failed_audit_write_stores_nothing(store, clock):
    def failing_uow():
        uow = InMemoryUnitOfWork(store)

        async def append(entry):
            raise StorageError("disk full")

        uow.audit_log.append = append
        return uow

    with pytest.raises(StorageError):
        await CreateLead(failing_uow, clock=clock).execute("org_1", "api", "api")

    assert store.leads == {}
    assert store.audit_entries == []


@pytest.mark.asyncio
async def test_unknown_source_is_rejected(create_lead, store):
    with pytest.raises(ValueError):
        await create_lead.execute("org_1", "api", "fax")

    assert store.leads == {}
