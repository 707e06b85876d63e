"""Unit of work port."""

from abc import ABC, abstractmethod
from typing import Callable

from app.application.ports.audit_log_sink import AuditLogSink
from app.application.ports.lead_repository import LeadRepository


class StorageError(Exception):
    """Raised by adapters when the backing store fails."""


class UnitOfWork(ABC):
    """
    Port interface for one atomic unit of work over leads and the audit log.

    Usage:
        async with uow_factory() as uow:
            lead = await uow.leads.get(lead_id, for_update=True)
            await uow.leads.update(lead_id, {...})
            await uow.audit_log.append(entry)
            await uow.commit()

    Leaving the block without commit(), or with an exception, rolls back
    every write made through the unit of work and releases its locks.
    """

    leads: LeadRepository
    audit_log: AuditLogSink

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None or not self.committed:
                await self.rollback()
        finally:
            await self.close()

    @property
    @abstractmethod
    def committed(self) -> bool:
        """Whether commit() has succeeded."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Make all writes durable and visible to other readers."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard all writes made in this unit of work."""
        pass

    async def close(self) -> None:
        """Release resources held by the unit of work."""
        return None


UnitOfWorkFactory = Callable[[], UnitOfWork]
