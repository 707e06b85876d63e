"""Transition check value object."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TransitionCheck:
    """Outcome of a precondition or transition check."""

    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "TransitionCheck":
        """Build an allowed check."""
        return cls(allowed=True)

    @classmethod
    def denied(cls, reason: str) -> "TransitionCheck":
        """Build a denied check carrying a human-readable reason."""
        return cls(allowed=False, reason=reason)
