"""Postgres unit of work adapter."""

from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.adapters.outbound.audit.postgres_audit_log_sink import PostgresAuditLogSink
from app.adapters.outbound.lead.postgres_lead_repository import PostgresLeadRepository
from app.application.ports.unit_of_work import StorageError, UnitOfWork
from app.infrastructure.db import get_db_session
from app.infrastructure.logging.logger import logger


class PostgresUnitOfWork(UnitOfWork):
    """
    Unit of work backed by one SQLAlchemy session and its transaction.

    Row locks taken with get(..., for_update=True) are held until the
    transaction commits or rolls back.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None) -> None:
        """
        Initialize unit of work.

        Args:
            session_factory: Session factory (defaults to the configured database)
        """
        self._session_factory = session_factory or get_db_session
        self._session: Optional[Session] = None
        self._committed = False

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._session = self._session_factory()
        self.leads = PostgresLeadRepository(self._session)
        self.audit_log = PostgresAuditLogSink(self._session)
        return self

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def session(self) -> Session:
        """Get the underlying session."""
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use 'async with' context.")
        return self._session

    async def commit(self) -> None:
        """Commit the transaction."""
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error while committing unit of work: {str(e)}")
            raise StorageError(str(e)) from e
        self._committed = True

    async def rollback(self) -> None:
        """Roll back the transaction."""
        if self._session is not None:
            self._session.rollback()

    async def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
