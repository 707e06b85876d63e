"""In-memory unit of work adapter."""

from app.adapters.outbound.audit.audit_log_sink import InMemoryAuditLogSink
from app.adapters.outbound.lead.lead_repository import InMemoryLeadRepository, InMemoryLeadStore
from app.application.ports.unit_of_work import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of work over an InMemoryLeadStore.

    Lead and audit writes are staged and published together on commit.
    Leads read with for_update stay locked until commit or rollback, which
    serializes concurrent transitions on the same lead.
    """

    def __init__(self, store: InMemoryLeadStore) -> None:
        """
        Initialize unit of work.

        Args:
            store: Shared committed state
        """
        self._store = store
        self.leads = InMemoryLeadRepository(store)
        self.audit_log = InMemoryAuditLogSink(store)
        self._committed = False

    @property
    def committed(self) -> bool:
        return self._committed

    async def commit(self) -> None:
        """Publish staged leads and audit entries, then release locks."""
        self.leads.flush_to_store()
        self.audit_log.flush_to_store()
        self._committed = True
        self.leads.release_locks()

    async def rollback(self) -> None:
        """Discard staged writes and release locks."""
        self.leads.discard()
        self.audit_log.discard()
        self.leads.release_locks()

    async def close(self) -> None:
        self.leads.release_locks()
