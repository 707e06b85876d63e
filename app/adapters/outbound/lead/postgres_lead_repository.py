"""Postgres-backed lead repository adapter."""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.ports.lead_repository import LeadRepository
from app.application.ports.unit_of_work import StorageError
from app.domain.entities.lead import Lead
from app.domain.pipeline.transition_map import WAITING_STATUSES
from app.domain.value_objects.lead_status import LeadStatus
from app.infrastructure.logging.logger import logger

from .models import LeadModel

_ENTITY_FIELDS = (
    "organization_id",
    "company",
    "key_decision_maker",
    "email",
    "mobile",
    "notes",
    "email_sent_1",
    "dm_li_sent_1",
    "dm_fb_sent_1",
    "dm_ig_sent_1",
    "call_done",
    "email_sent_2",
    "dm_sent_2",
    "wa_voice_sent",
    "mobile_valid",
    "next_action",
    "outcome",
    "qualified",
)

_DATETIME_FIELDS = (
    "replied_at_utc",
    "last_action_utc",
    "next_action_due_utc",
    "created_at",
    "updated_at",
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite returns naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PostgresLeadRepository(LeadRepository):
    """Postgres implementation of lead repository bound to one session."""

    def __init__(self, session: Session) -> None:
        """
        Initialize repository.

        Args:
            session: Session owned by the enclosing unit of work
        """
        self._session = session

    def _model_to_entity(self, model: LeadModel) -> Lead:
        """
        Convert LeadModel to Lead entity.

        Args:
            model: SQLAlchemy model instance

        Returns:
            Lead entity
        """
        values: dict[str, Any] = {name: getattr(model, name) for name in _ENTITY_FIELDS}
        values.update({name: _as_utc(getattr(model, name)) for name in _DATETIME_FIELDS})
        return Lead(id=model.id, status=LeadStatus(model.status), **values)

    def _apply(self, model: LeadModel, fields: dict[str, Any]) -> None:
        for name, value in fields.items():
            if name == "id":
                raise ValueError("Lead id is immutable")
            if name == "status":
                value = LeadStatus(value).value
            setattr(model, name, value)
        model.updated_at = datetime.now(timezone.utc)

    def _load(self, lead_id: str, for_update: bool) -> Optional[LeadModel]:
        query = self._session.query(LeadModel).filter(LeadModel.id == lead_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    async def get(self, lead_id: str, for_update: bool = False) -> Optional[Lead]:
        """
        Get a lead by id.

        Args:
            lead_id: Lead identifier
            for_update: Take a row lock (SELECT ... FOR UPDATE) held until the
                session's transaction ends

        Returns:
            Lead entity, or None if not found
        """
        try:
            model = self._load(lead_id, for_update)
        except SQLAlchemyError as e:
            logger.error(f"Database error while getting lead {lead_id}: {str(e)}")
            raise StorageError(str(e)) from e
        if model is None:
            return None
        return self._model_to_entity(model)

    async def add(self, lead: Lead) -> None:
        """
        Insert a new lead.

        Args:
            lead: Lead entity to add
        """
        model = LeadModel(id=lead.id, status=lead.status.value)
        for name in _ENTITY_FIELDS + _DATETIME_FIELDS:
            setattr(model, name, getattr(lead, name))
        try:
            self._session.add(model)
            self._session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database error while adding lead {lead.id}: {str(e)}")
            raise StorageError(str(e)) from e

    async def update(self, lead_id: str, fields: dict[str, Any]) -> Lead:
        """
        Apply a partial update within the current transaction.

        Args:
            lead_id: Lead identifier
            fields: Fields to overwrite

        Returns:
            The updated lead
        """
        try:
            model = self._load(lead_id, for_update=False)
            if model is None:
                raise LookupError(f"Lead {lead_id} not found")
            self._apply(model, fields)
            self._session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database error while updating lead {lead_id}: {str(e)}")
            raise StorageError(str(e)) from e
        return self._model_to_entity(model)

    async def list_due(self, now: datetime, organization_id: Optional[str] = None) -> list[Lead]:
        """
        List waiting leads whose next action is due.

        Args:
            now: Reference time
            organization_id: Restrict to one tenant when given

        Returns:
            Due leads ascending by next_action_due_utc
        """
        try:
            query = self._session.query(LeadModel).filter(
                LeadModel.status.in_([status.value for status in WAITING_STATUSES]),
                LeadModel.next_action_due_utc.isnot(None),
                LeadModel.next_action_due_utc <= now,
            )
            if organization_id is not None:
                query = query.filter(LeadModel.organization_id == organization_id)
            models = query.order_by(LeadModel.next_action_due_utc.asc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Database error while listing due leads: {str(e)}")
            raise StorageError(str(e)) from e
        return [self._model_to_entity(model) for model in models]
