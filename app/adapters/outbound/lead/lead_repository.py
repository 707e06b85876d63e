"""In-memory lead repository adapter."""

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from app.application.ports.lead_repository import LeadRepository
from app.domain.entities.audit_log_entry import AuditLogEntry
from app.domain.entities.lead import Lead
from app.domain.pipeline.transition_map import WAITING_STATUSES


class InMemoryLeadStore:
    """Committed leads and audit entries shared by in-memory units of work."""

    def __init__(self) -> None:
        """Initialize empty store."""
        self.leads: dict[str, Lead] = {}
        self.audit_entries: list[AuditLogEntry] = []
        # Row locks exist only while some unit of work holds or awaits them
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    async def acquire(self, lead_id: str) -> None:
        """
        Acquire the row lock guarding one lead.

        Args:
            lead_id: Lead identifier
        """
        lock = self._locks.setdefault(lead_id, asyncio.Lock())
        self._lock_users[lead_id] = self._lock_users.get(lead_id, 0) + 1
        try:
            await lock.acquire()
        except BaseException:
            self._forget(lead_id)
            raise

    def release(self, lead_id: str) -> None:
        """Release a row lock, dropping it once nobody else waits on it."""
        self._locks[lead_id].release()
        self._forget(lead_id)

    def is_locked(self, lead_id: str) -> bool:
        lock = self._locks.get(lead_id)
        return lock is not None and lock.locked()

    @property
    def lock_count(self) -> int:
        """Number of row locks currently tracked."""
        return len(self._locks)

    def _forget(self, lead_id: str) -> None:
        users = self._lock_users[lead_id] - 1
        if users:
            self._lock_users[lead_id] = users
        else:
            del self._lock_users[lead_id]
            del self._locks[lead_id]


class InMemoryLeadRepository(LeadRepository):
    """
    In-memory implementation of lead repository.

    Writes are staged until the owning unit of work commits. Reads return
    staged state first so a unit of work sees its own writes, while other
    readers only ever see committed leads.
    """

    def __init__(self, store: InMemoryLeadStore) -> None:
        """
        Initialize repository bound to one unit of work.

        Args:
            store: Shared committed state
        """
        self._store = store
        self._staged: dict[str, Lead] = {}
        self._held_locks: set[str] = set()

    def _current(self, lead_id: str) -> Optional[Lead]:
        if lead_id in self._staged:
            return self._staged[lead_id]
        return self._store.leads.get(lead_id)

    async def get(self, lead_id: str, for_update: bool = False) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier
            for_update: Hold the lead's lock until commit or rollback

        Returns:
            Copy of the lead, or None if not found
        """
        if for_update and lead_id not in self._held_locks:
            await self._store.acquire(lead_id)
            self._held_locks.add(lead_id)

        lead = self._current(lead_id)
        return replace(lead) if lead is not None else None

    async def add(self, lead: Lead) -> None:
        """
        Stage a new lead.

        Args:
            lead: Lead entity to add
        """
        if self._current(lead.id) is not None:
            raise ValueError(f"Lead {lead.id} already exists")
        self._staged[lead.id] = replace(lead)

    async def update(self, lead_id: str, fields: dict[str, Any]) -> Lead:
        """
        Stage a partial update.

        Args:
            lead_id: Lead identifier
            fields: Fields to overwrite

        Returns:
            Copy of the updated lead
        """
        current = self._current(lead_id)
        if current is None:
            raise LookupError(f"Lead {lead_id} not found")
        updated = replace(current, **fields)
        updated.touch()
        self._staged[lead_id] = updated
        return replace(updated)

    async def list_due(self, now: datetime, organization_id: Optional[str] = None) -> list[Lead]:
        """
        List committed waiting leads whose next action is due.

        Args:
            now: Reference time
            organization_id: Restrict to one tenant when given

        Returns:
            Due leads ascending by next_action_due_utc
        """
        due = [
            lead
            for lead in self._store.leads.values()
            if lead.status in WAITING_STATUSES
            and lead.next_action_due_utc is not None
            and lead.next_action_due_utc <= now
            and (organization_id is None or lead.organization_id == organization_id)
        ]
        due.sort(key=lambda lead: lead.next_action_due_utc)
        return [replace(lead) for lead in due]

    def flush_to_store(self) -> None:
        """Publish staged leads to the shared store."""
        self._store.leads.update(self._staged)
        self._staged = {}

    def discard(self) -> None:
        """Drop staged leads."""
        self._staged = {}

    def release_locks(self) -> None:
        """Release every lead lock held by this repository."""
        for lead_id in self._held_locks:
            self._store.release(lead_id)
        self._held_locks = set()
