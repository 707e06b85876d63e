"""Unit of work adapters."""

from app.adapters.outbound.unit_of_work.in_memory_unit_of_work import InMemoryUnitOfWork
from app.adapters.outbound.unit_of_work.postgres_unit_of_work import PostgresUnitOfWork

__all__ = [
    "InMemoryUnitOfWork",
    "PostgresUnitOfWork",
]
