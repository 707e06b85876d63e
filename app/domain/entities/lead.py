"""Lead entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from app.domain.value_objects.lead_status import LeadStatus


@dataclass
class Lead:
    """
    Lead entity: the subject of the outreach pipeline.

    `status`, `last_action_utc`, `next_action`, `next_action_due_utc`,
    `outcome` and `qualified` are owned by the transition engine. Action
    flags and `replied_at_utc` are only written by the action logger.
    """

    organization_id: str
    id: str = field(default_factory=lambda: str(uuid4()))
    status: LeadStatus = LeadStatus.NEW
    company: Optional[str] = None
    key_decision_maker: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    notes: Optional[str] = None
    # Action flags
    email_sent_1: bool = False
    dm_li_sent_1: bool = False
    dm_fb_sent_1: bool = False
    dm_ig_sent_1: bool = False
    call_done: bool = False
    email_sent_2: bool = False
    dm_sent_2: bool = False
    wa_voice_sent: bool = False
    replied_at_utc: Optional[datetime] = None
    mobile_valid: bool = False
    # Pipeline bookkeeping
    last_action_utc: Optional[datetime] = None
    next_action: Optional[str] = None
    next_action_due_utc: Optional[datetime] = None  # None means due now
    outcome: Optional[str] = None
    qualified: Optional[bool] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(timezone.utc)

    @property
    def has_replied(self) -> bool:
        return self.replied_at_utc is not None

    def action_flags(self) -> dict[str, object]:
        """
        Snapshot of the outreach facts the preconditions read.

        Returns:
            Mapping of flag field name to its current value
        """
        return {
            "email_sent_1": self.email_sent_1,
            "dm_li_sent_1": self.dm_li_sent_1,
            "dm_fb_sent_1": self.dm_fb_sent_1,
            "dm_ig_sent_1": self.dm_ig_sent_1,
            "call_done": self.call_done,
            "email_sent_2": self.email_sent_2,
            "dm_sent_2": self.dm_sent_2,
            "wa_voice_sent": self.wa_voice_sent,
            "replied_at_utc": self.replied_at_utc,
        }
