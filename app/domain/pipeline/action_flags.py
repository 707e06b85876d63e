"""Outreach actions and the lead fields they record."""

from types import MappingProxyType
from typing import Mapping

MARK_REPLIED = "mark_replied"

ACTION_FLAG_MAP: Mapping[str, str] = MappingProxyType(
    {
        "send_email_1": "email_sent_1",
        "send_dm_li_1": "dm_li_sent_1",
        "send_dm_fb_1": "dm_fb_sent_1",
        "send_dm_ig_1": "dm_ig_sent_1",
        "call_done": "call_done",
        "send_email_2": "email_sent_2",
        "send_dm_2": "dm_sent_2",
        "send_wa_voice": "wa_voice_sent",
        MARK_REPLIED: "replied_at_utc",  # timestamp, not a boolean
    }
)
