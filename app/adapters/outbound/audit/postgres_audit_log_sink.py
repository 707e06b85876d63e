"""Postgres-backed audit log sink adapter."""

from datetime import timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.ports.audit_log_sink import AuditLogSink
from app.application.ports.unit_of_work import StorageError
from app.domain.entities.audit_log_entry import AuditLogEntry
from app.domain.value_objects.transition_source import TransitionSource
from app.infrastructure.logging.logger import logger

from .models import AuditLogModel


class PostgresAuditLogSink(AuditLogSink):
    """Postgres implementation of the audit log bound to one session."""

    def __init__(self, session: Session) -> None:
        """
        Initialize sink.

        Args:
            session: Session owned by the enclosing unit of work
        """
        self._session = session

    def _model_to_entity(self, model: AuditLogModel) -> AuditLogEntry:
        created_at = model.created_at
        if created_at and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return AuditLogEntry(
            id=model.id,
            lead_id=model.lead_id,
            organization_id=model.organization_id,
            actor=model.actor,
            action=model.action,
            before=dict(model.before),
            after=dict(model.after),
            source=TransitionSource(model.source),
            created_at=created_at,
        )

    async def append(self, entry: AuditLogEntry) -> None:
        """
        Insert an entry within the current transaction.

        Args:
            entry: Audit log entry to record
        """
        model = AuditLogModel(
            id=entry.id,
            lead_id=entry.lead_id,
            organization_id=entry.organization_id,
            actor=entry.actor,
            action=entry.action,
            before=entry.before,
            after=entry.after,
            source=entry.source.value,
            created_at=entry.created_at,
        )
        try:
            self._session.add(model)
            self._session.flush()
        except SQLAlchemyError as e:
            logger.error(
                f"Database error while writing audit entry for lead {entry.lead_id}: {str(e)}"
            )
            raise StorageError(str(e)) from e

    async def list_for_lead(self, lead_id: str) -> list[AuditLogEntry]:
        """
        List entries for a lead, oldest first.

        Args:
            lead_id: Lead identifier

        Returns:
            Audit log entries for the lead
        """
        try:
            models = (
                self._session.query(AuditLogModel)
                .filter(AuditLogModel.lead_id == lead_id)
                .order_by(AuditLogModel.created_at.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Database error while listing audit entries for lead {lead_id}: {str(e)}")
            raise StorageError(str(e)) from e
        return [self._model_to_entity(model) for model in models]
