"""Unit tests for LogLeadAction use case."""

import pytest

from app.application.use_cases.log_lead_action import (
    ActionAlreadyRecordedError,
    LeadNotFoundError,
    LogLeadAction,
    UnknownActionError,
)
from app.domain.entities.audit_log_entry import ACTION_LOGGED
from app.domain.pipeline.action_flags import ACTION_FLAG_MAP
from app.domain.value_objects.lead_status import LeadStatus as S
from tests.factories import NOW, make_lead


@pytest.fixture
def log_action(uow_factory, clock):
    """Create LogLeadAction with a fixed clock."""
    return LogLeadAction(uow_factory, clock=clock)


@pytest.mark.asyncio
async def test_sets_flag_without_touching_pipeline_fields(log_action, seed, store):
    """Test that logging an action flips its flag but leaves status and timers alone."""
    lead = make_lead()
    seed(lead)

    result = await log_action.execute(lead.id, "send_email_1", "agent:bot", "agent")

    assert result.action_recorded == "send_email_1"
    stored = store.leads[lead.id]
    assert stored.email_sent_1 is True
    assert stored.status == S.NEW
    assert stored.last_action_utc is None


@pytest.mark.asyncio
async def test_every_boolean_action_maps_to_its_flag(log_action, seed, store):
    lead = make_lead()
    seed(lead)

    for action, field_name in ACTION_FLAG_MAP.items():
        if action == "mark_replied":
            continue
        await log_action.execute(lead.id, action, "user:1", "api")
        assert getattr(store.leads[lead.id], field_name) is True


@pytest.mark.asyncio
async def test_mark_replied_records_timestamp(log_action, seed, store):
    lead = make_lead(status=S.WAITING_D2)
    seed(lead)

    await log_action.execute(lead.id, "mark_replied", "sync:gmail", "sync")

    assert store.leads[lead.id].replied_at_utc == NOW


@pytest.mark.asyncio
async def test_writes_audit_entry(log_action, seed, store):
    lead = make_lead()
    seed(lead)

    await log_action.execute(lead.id, "call_done", "user:7", "api")

    (entry,) = store.audit_entries
    assert entry.action == ACTION_LOGGED
    assert entry.actor == "user:7"
    assert entry.before == {"call_done": False}
    assert entry.after == {"call_done": True, "action": "call_done"}


@pytest.mark.asyncio
async def test_appends_notes(log_action, seed, store):
    lead = make_lead(notes="first line")
    seed(lead)

    await log_action.execute(lead.id, "send_dm_2", "user:1", "api", notes="sent via LinkedIn")

    assert store.leads[lead.id].notes == (
        f"first line\n[{NOW.isoformat()}] api:send_dm_2: sent via LinkedIn"
    )


@pytest.mark.asyncio
async def test_unknown_action(log_action, seed):
    lead = make_lead()
    seed(lead)

    with pytest.raises(UnknownActionError, match="Unknown action: send_fax"):
        await log_action.execute(lead.id, "send_fax", "user:1", "api")


@pytest.mark.asyncio
async def test_missing_lead(log_action):
    with pytest.raises(LeadNotFoundError):
        await log_action.execute("missing", "send_email_1", "user:1", "api")


@pytest.mark.asyncio
async def test_already_recorded(log_action, seed, store):
    """Test that recording the same action twice is a conflict and changes nothing."""
    lead = make_lead(email_sent_1=True)
    replied = make_lead(replied_at_utc=NOW)
    seed(lead, replied)

    with pytest.raises(ActionAlreadyRecordedError, match="send_email_1 already recorded"):
        await log_action.execute(lead.id, "send_email_1", "user:1", "api")
    with pytest.raises(ActionAlreadyRecordedError, match="Already replied"):
        await log_action.execute(replied.id, "mark_replied", "user:1", "api")

    assert store.audit_entries == []
    assert not store.is_locked(lead.id)
