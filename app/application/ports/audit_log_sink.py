"""Audit log sink port."""

from abc import ABC, abstractmethod

from app.domain.entities.audit_log_entry import AuditLogEntry


class AuditLogSink(ABC):
    """Port interface for the append-only audit log."""

    @abstractmethod
    async def append(self, entry: AuditLogEntry) -> None:
        """
        Append an entry.

        Args:
            entry: Audit log entry to record
        """
        pass

    @abstractmethod
    async def list_for_lead(self, lead_id: str) -> list[AuditLogEntry]:
        """
        List entries recorded for a lead, oldest first.

        Args:
            lead_id: Lead identifier

        Returns:
            Audit log entries for the lead
        """
        pass
