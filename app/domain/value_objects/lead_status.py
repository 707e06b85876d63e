"""Lead status value object."""

from enum import Enum


class LeadStatus(str, Enum):
    """Node of the outreach pipeline state machine."""

    NEW = "NEW"
    CONTACTED_1 = "CONTACTED_1"
    WAITING_D2 = "WAITING_D2"
    CALL_DUE = "CALL_DUE"
    CALLED = "CALLED"
    WAITING_D1 = "WAITING_D1"
    CONTACTED_2 = "CONTACTED_2"
    WA_VOICE_DUE = "WA_VOICE_DUE"
    REPLIED = "REPLIED"
    QUALIFIED = "QUALIFIED"
    NOT_INTERESTED = "NOT_INTERESTED"
    COMPLETED = "COMPLETED"

    def __str__(self) -> str:
        return self.value
