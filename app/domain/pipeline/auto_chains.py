"""Statuses that advance on their own as soon as they are entered."""

from types import MappingProxyType
from typing import Callable, Mapping, Optional

from app.domain.entities.lead import Lead
from app.domain.pipeline.transition_rules import get_rule
from app.domain.value_objects.lead_status import LeadStatus

S = LeadStatus

ChainTarget = Callable[[Lead], LeadStatus]

# Side effects of a chained hop come from the rule table entry for the hop.
AUTO_CHAINS: Mapping[LeadStatus, ChainTarget] = MappingProxyType(
    {
        S.CONTACTED_1: lambda lead: S.WAITING_D2,
        S.CALLED: lambda lead: S.WAITING_D1,
        S.CONTACTED_2: lambda lead: S.WA_VOICE_DUE if lead.mobile_valid else S.COMPLETED,
    }
)


def next_chained_status(lead: Lead) -> Optional[LeadStatus]:
    """
    Resolve the status a freshly updated lead chains into.

    Args:
        lead: Lead as written by the transition that just applied

    Returns:
        Chain target, or None when the status does not chain or no rule
        exists for the computed hop
    """
    chain = AUTO_CHAINS.get(lead.status)
    if chain is None:
        return None
    target = chain(lead)
    if get_rule(lead.status, target) is None:
        return None
    return target
