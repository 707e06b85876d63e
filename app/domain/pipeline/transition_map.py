"""Allowed status transitions of the outreach pipeline."""

from types import MappingProxyType
from typing import Mapping

from app.domain.value_objects.lead_status import LeadStatus

S = LeadStatus

# REPLIED and NOT_INTERESTED are interrupts reachable from every active status.
TRANSITION_MAP: Mapping[LeadStatus, tuple[LeadStatus, ...]] = MappingProxyType(
    {
        S.NEW: (S.CONTACTED_1, S.REPLIED, S.NOT_INTERESTED),
        S.CONTACTED_1: (S.WAITING_D2, S.REPLIED, S.NOT_INTERESTED),
        S.WAITING_D2: (S.CALL_DUE, S.REPLIED, S.NOT_INTERESTED),
        S.CALL_DUE: (S.CALLED, S.REPLIED, S.NOT_INTERESTED),
        S.CALLED: (S.WAITING_D1, S.REPLIED, S.NOT_INTERESTED),
        S.WAITING_D1: (S.CONTACTED_2, S.REPLIED, S.NOT_INTERESTED),
        S.CONTACTED_2: (S.WA_VOICE_DUE, S.COMPLETED, S.REPLIED, S.NOT_INTERESTED),
        S.WA_VOICE_DUE: (S.COMPLETED, S.REPLIED, S.NOT_INTERESTED),
        S.REPLIED: (S.QUALIFIED, S.NOT_INTERESTED),
        S.QUALIFIED: (S.COMPLETED,),
        S.NOT_INTERESTED: (S.COMPLETED,),
        S.COMPLETED: (),
    }
)

TERMINAL_STATUSES = frozenset({S.COMPLETED})

# Statuses that only advance once their wait timer has elapsed.
WAITING_STATUSES = (S.WAITING_D2, S.WAITING_D1)

# Target the scheduler requests for each waiting status.
SCHEDULED_TARGETS: Mapping[LeadStatus, LeadStatus] = MappingProxyType(
    {
        S.WAITING_D2: S.CALL_DUE,
        S.WAITING_D1: S.CONTACTED_2,
    }
)


def allowed_targets(status: LeadStatus) -> tuple[LeadStatus, ...]:
    """
    Get the statuses a lead may legally move to from `status`.

    Args:
        status: Current lead status

    Returns:
        Ordered tuple of reachable statuses (empty for terminal statuses)
    """
    return TRANSITION_MAP.get(status, ())


def is_adjacent(from_status: LeadStatus, to_status: LeadStatus) -> bool:
    return to_status in allowed_targets(from_status)


def adjacent_pairs() -> list[tuple[LeadStatus, LeadStatus]]:
    """List every legal (from, to) pair in map order."""
    return [(source, target) for source, targets in TRANSITION_MAP.items() for target in targets]
