"""SQLAlchemy ORM models for leads."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class LeadModel(Base):
    """SQLAlchemy model for leads table."""

    __tablename__ = "leads"

    id = Column(String, primary_key=True, index=True)
    organization_id = Column(String, nullable=False, index=True)
    status = Column(String(32), nullable=False, default="NEW")
    company = Column(String, nullable=True)
    key_decision_maker = Column(String, nullable=True)
    email = Column(String, nullable=True)
    mobile = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    email_sent_1 = Column(Boolean, nullable=False, default=False)
    dm_li_sent_1 = Column(Boolean, nullable=False, default=False)
    dm_fb_sent_1 = Column(Boolean, nullable=False, default=False)
    dm_ig_sent_1 = Column(Boolean, nullable=False, default=False)
    call_done = Column(Boolean, nullable=False, default=False)
    email_sent_2 = Column(Boolean, nullable=False, default=False)
    dm_sent_2 = Column(Boolean, nullable=False, default=False)
    wa_voice_sent = Column(Boolean, nullable=False, default=False)
    replied_at_utc = Column(DateTime(timezone=True), nullable=True)
    mobile_valid = Column(Boolean, nullable=False, default=False)
    last_action_utc = Column(DateTime(timezone=True), nullable=True)
    next_action = Column(String, nullable=True)
    next_action_due_utc = Column(DateTime(timezone=True), nullable=True)
    outcome = Column(String, nullable=True)
    qualified = Column(Boolean, nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("ix_leads_status_next_action_due_utc", "status", "next_action_due_utc"),
    )
