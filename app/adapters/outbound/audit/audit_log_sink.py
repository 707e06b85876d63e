"""In-memory audit log sink adapter."""

from app.adapters.outbound.lead.lead_repository import InMemoryLeadStore
from app.application.ports.audit_log_sink import AuditLogSink
from app.domain.entities.audit_log_entry import AuditLogEntry


class InMemoryAuditLogSink(AuditLogSink):
    """In-memory audit log; entries become visible when the unit of work commits."""

    def __init__(self, store: InMemoryLeadStore) -> None:
        """
        Initialize sink bound to one unit of work.

        Args:
            store: Shared committed state
        """
        self._store = store
        self._staged: list[AuditLogEntry] = []

    async def append(self, entry: AuditLogEntry) -> None:
        self._staged.append(entry)

    async def list_for_lead(self, lead_id: str) -> list[AuditLogEntry]:
        """
        List entries for a lead, including ones staged in this unit of work.

        Args:
            lead_id: Lead identifier

        Returns:
            Audit log entries, oldest first
        """
        entries = self._store.audit_entries + self._staged
        return [entry for entry in entries if entry.lead_id == lead_id]

    def flush_to_store(self) -> None:
        """Publish staged entries to the shared store."""
        self._store.audit_entries.extend(self._staged)
        self._staged = []

    def discard(self) -> None:
        """Drop staged entries."""
        self._staged = []
