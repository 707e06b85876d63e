"""Audit log entry entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from app.domain.value_objects.transition_source import TransitionSource

STATUS_CHANGE = "status_change"
ACTION_LOGGED = "action_logged"
LEAD_CREATED = "lead_created"


@dataclass(frozen=True)
class AuditLogEntry:
    """Append-only record of one change applied to a lead."""

    lead_id: str
    organization_id: str
    actor: str
    action: str
    before: dict[str, Any]
    after: dict[str, Any]
    source: TransitionSource
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
