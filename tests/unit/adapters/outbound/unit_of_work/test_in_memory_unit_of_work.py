"""Unit tests for the in-memory unit of work."""

import asyncio

import pytest

from app.adapters.outbound.unit_of_work.in_memory_unit_of_work import InMemoryUnitOfWork
from app.application.use_cases.lead_transition_engine import LeadTransitionEngine
from app.domain.entities.audit_log_entry import STATUS_CHANGE, AuditLogEntry
from app.domain.value_objects.lead_status import LeadStatus as S
from app.domain.value_objects.transition_source import TransitionSource
from tests.factories import make_lead


def _entry(lead):
    return AuditLogEntry(
        lead_id=lead.id,
        organization_id=lead.organization_id,
        actor="user:1",
        action=STATUS_CHANGE,
        before={"status": "NEW"},
        after={"status": "CONTACTED_1"},
        source=TransitionSource.API,
    )


@pytest.mark.asyncio
async def test_commit_publishes_lead_and_audit_together(store):
    lead = make_lead()

    async with InMemoryUnitOfWork(store) as uow:
        await uow.leads.add(lead)
        await uow.audit_log.append(_entry(lead))
        await uow.commit()

    assert store.leads[lead.id].id == lead.id
    assert len(store.audit_entries) == 1


@pytest.mark.asyncio
async def test_exit_without_commit_rolls_back(store, seed):
    lead = make_lead()
    seed(lead)

    async with InMemoryUnitOfWork(store) as uow:
        await uow.leads.update(lead.id, {"status": S.CONTACTED_1})
        await uow.audit_log.append(_entry(lead))

    assert store.leads[lead.id].status == S.NEW
    assert store.audit_entries == []


@pytest.mark.asyncio
async def test_exception_rolls_back_and_releases_lock(store, seed):
    lead = make_lead()
    seed(lead)

    with pytest.raises(RuntimeError):
        async with InMemoryUnitOfWork(store) as uow:
            await uow.leads.get(lead.id, for_update=True)
            await uow.leads.update(lead.id, {"status": S.CONTACTED_1})
            raise RuntimeError("boom")

    assert store.leads[lead.id].status == S.NEW
    assert not store.is_locked(lead.id)


@pytest.mark.asyncio
async def test_reads_see_own_writes_but_others_see_committed(store, seed):
    """Test read-your-writes inside a unit of work and isolation outside it."""
    lead = make_lead()
    seed(lead)

    async with InMemoryUnitOfWork(store) as writer:
        await writer.leads.update(lead.id, {"status": S.CONTACTED_1, "next_action": "call"})
        own = await writer.leads.get(lead.id)

        async with InMemoryUnitOfWork(store) as reader:
            other = await reader.leads.get(lead.id)

        assert own.status == S.CONTACTED_1
        assert other.status == S.NEW
        await writer.commit()

    async with InMemoryUnitOfWork(store) as reader:
        assert (await reader.leads.get(lead.id)).next_action == "call"


@pytest.mark.asyncio
async def test_for_update_serializes_writers(store, seed):
    """Test that a second locking read waits until the first unit of work ends."""
    lead = make_lead()
    seed(lead)
    order = []

    async def first():
        async with InMemoryUnitOfWork(store) as uow:
            await uow.leads.get(lead.id, for_update=True)
            order.append("first:locked")
            await asyncio.sleep(0.01)
            await uow.leads.update(lead.id, {"status": S.CONTACTED_1})
            await uow.commit()
            order.append("first:committed")

    async def second():
        await asyncio.sleep(0)
        async with InMemoryUnitOfWork(store) as uow:
            seen = await uow.leads.get(lead.id, for_update=True)
            order.append(f"second:{seen.status.value}")

    await asyncio.gather(first(), second())

    assert order == ["first:locked", "first:committed", "second:CONTACTED_1"]


@pytest.mark.asyncio
async def test_update_missing_lead(store):
    async with InMemoryUnitOfWork(store) as uow:
        with pytest.raises(LookupError):
            await uow.leads.update("missing", {"status": S.CONTACTED_1})


@pytest.mark.asyncio
async def test_add_duplicate_lead(store, seed):
    lead = make_lead()
    seed(lead)

    async with InMemoryUnitOfWork(store) as uow:
        with pytest.raises(ValueError):
            await uow.leads.add(lead)


@pytest.mark.asyncio
async def test_returned_leads_are_copies(store, seed):
    lead = make_lead()
    seed(lead)

    async with InMemoryUnitOfWork(store) as uow:
        copy = await uow.leads.get(lead.id)
        copy.status = S.COMPLETED

    assert store.leads[lead.id].status == S.NEW


@pytest.mark.asyncio
async def test_advancing_unknown_leads_keeps_no_locks(store, uow_factory, clock):
    engine = LeadTransitionEngine(uow_factory, clock=clock)

    for i in range(50):
        result = await engine.advance_lead(f"missing-{i}", S.CONTACTED_1, "user:1", "api")
        assert result.success is False

    assert store.lock_count == 0


@pytest.mark.asyncio
async def test_lock_survives_while_waiters_remain(store, seed):
    """Test that a contended lock is kept until the last waiter releases it."""
    lead = make_lead()
    seed(lead)
    holder_ready = asyncio.Event()
    seen_counts = []

    async def holder():
        async with InMemoryUnitOfWork(store) as uow:
            await uow.leads.get(lead.id, for_update=True)
            holder_ready.set()
            await asyncio.sleep(0.01)

    async def waiter():
        await holder_ready.wait()
        async with InMemoryUnitOfWork(store) as uow:
            await uow.leads.get(lead.id, for_update=True)
            seen_counts.append(store.lock_count)

    await asyncio.gather(holder(), waiter())

    assert seen_counts == [1]
    assert store.lock_count == 0
    assert not store.is_locked(lead.id)
