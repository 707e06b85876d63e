"""Transition source value object."""

from enum import Enum


class TransitionSource(str, Enum):
    """Origin of a change, recorded in the audit log."""

    API = "api"
    AGENT = "agent"
    SYNC = "sync"
    SCHEDULER = "scheduler"

    def __str__(self) -> str:
        return self.value
