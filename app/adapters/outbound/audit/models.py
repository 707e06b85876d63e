"""SQLAlchemy ORM models for the audit log."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String

# Reuse the leads declarative base so both tables share one metadata
from app.adapters.outbound.lead.models import Base


class AuditLogModel(Base):
    """SQLAlchemy model for audit_logs table."""

    __tablename__ = "audit_logs"

    id = Column(String, primary_key=True)
    lead_id = Column(String, ForeignKey("leads.id"), nullable=False, index=True)
    organization_id = Column(String, nullable=False, index=True)
    actor = Column(String, nullable=False)
    action = Column(String(32), nullable=False)
    before = Column(JSON, nullable=False)
    after = Column(JSON, nullable=False)
    source = Column(String(16), nullable=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
