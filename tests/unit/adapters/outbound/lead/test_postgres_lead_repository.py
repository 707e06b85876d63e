"""Unit tests for Postgres lead repository using SQLite in-memory."""

from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.adapters.outbound.lead.models import Base, LeadModel
from app.adapters.outbound.lead.postgres_lead_repository import PostgresLeadRepository
from app.application.ports.unit_of_work import StorageError
from app.domain.value_objects.lead_status import LeadStatus
from tests.factories import NOW, make_lead


@pytest.fixture
def session():
    """Create a session on a SQLite in-memory database for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def repository(session):
    """Create Postgres repository bound to the test session."""
    return PostgresLeadRepository(session)


@pytest.mark.asyncio
async def test_add_stores_status_as_text(repository, session):
    lead = make_lead(status=LeadStatus.WAITING_D1, next_action="follow_up_email_dm")

    await repository.add(lead)

    model = session.query(LeadModel).filter(LeadModel.id == lead.id).one()
    assert model.status == "WAITING_D1"
    assert model.organization_id == "org_1"
    assert model.next_action == "follow_up_email_dm"


@pytest.mark.asyncio
async def test_get_maps_every_field(repository):
    lead = make_lead(
        key_decision_maker="Ada Lovelace",
        mobile="+15550100",
        email_sent_1=True,
        dm_ig_sent_1=True,
        last_action_utc=NOW - timedelta(days=1),
        next_action_due_utc=NOW + timedelta(days=1),
        outcome=None,
    )
    await repository.add(lead)

    loaded = await repository.get(lead.id)

    assert loaded.status == LeadStatus.NEW
    assert loaded.key_decision_maker == "Ada Lovelace"
    assert loaded.mobile == "+15550100"
    assert loaded.email_sent_1 is True
    assert loaded.dm_ig_sent_1 is True
    assert loaded.call_done is False
    assert loaded.last_action_utc == NOW - timedelta(days=1)
    assert loaded.next_action_due_utc == NOW + timedelta(days=1)


@pytest.mark.asyncio
async def test_update_applies_partial_fields(repository):
    lead = make_lead(company="Acme Ltd")
    await repository.add(lead)

    updated = await repository.update(
        lead.id, {"status": LeadStatus.REPLIED, "next_action": "qualify"}
    )

    assert updated.status == LeadStatus.REPLIED
    assert updated.next_action == "qualify"
    assert updated.company == "Acme Ltd"
    assert updated.updated_at >= lead.updated_at


@pytest.mark.asyncio
async def test_update_missing_lead(repository):
    with pytest.raises(LookupError):
        await repository.update("missing", {"next_action": "call"})


@pytest.mark.asyncio
async def test_update_rejects_id_change(repository):
    lead = make_lead()
    await repository.add(lead)

    with pytest.raises(ValueError):
        await repository.update(lead.id, {"id": "other"})


@pytest.mark.asyncio
async def test_add_duplicate_raises_storage_error(repository, session):
    lead = make_lead()
    await repository.add(lead)
    session.expunge_all()

    with pytest.raises(StorageError):
        await repository.add(make_lead(id=lead.id))


@pytest.mark.asyncio
async def test_list_due_skips_leads_without_due_date(repository):
    await repository.add(make_lead(status=LeadStatus.WAITING_D2))
    due = make_lead(status=LeadStatus.WAITING_D2, next_action_due_utc=NOW)
    await repository.add(due)

    leads = await repository.list_due(NOW)

    assert [lead.id for lead in leads] == [due.id]
