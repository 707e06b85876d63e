"""
Precondition and side-effect rules for every legal transition.

Rules are keyed by (from, to) status pair. A precondition is a pure function
of the lead and the evaluation time; a side-effect resolver returns only the
fields the transition writes, so anything it leaves out stays unchanged.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from app.domain.entities.lead import Lead
from app.domain.pipeline.transition_map import adjacent_pairs
from app.domain.value_objects.lead_status import LeadStatus
from app.domain.value_objects.transition_check import TransitionCheck

S = LeadStatus

SideEffects = dict[str, Any]
Precondition = Callable[[Lead, datetime], TransitionCheck]
SideEffectResolver = Callable[[Lead, datetime], SideEffects]

SIDE_EFFECT_FIELDS = ("next_action", "next_action_due_utc", "outcome", "qualified")

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class TransitionRule:
    """Gate and effects attached to one (from, to) pair."""

    precondition: Precondition
    side_effects: SideEffectResolver


def rule_key(from_status: LeadStatus, to_status: LeadStatus) -> str:
    """Human-readable key used in messages, e.g. ``NEW→CONTACTED_1``."""
    return f"{from_status.value}→{to_status.value}"


def days_since(moment: datetime, now: datetime) -> float:
    """Fractional wall-clock days between `moment` and `now`."""
    return (now - moment).total_seconds() / SECONDS_PER_DAY


# Preconditions


def _always(lead: Lead, now: datetime) -> TransitionCheck:
    return TransitionCheck.ok()


def _flag_set(field_name: str, reason: str) -> Precondition:
    def check(lead: Lead, now: datetime) -> TransitionCheck:
        if getattr(lead, field_name) is True:
            return TransitionCheck.ok()
        return TransitionCheck.denied(reason)

    return check


def _elapsed_days(days: int) -> Precondition:
    def check(lead: Lead, now: datetime) -> TransitionCheck:
        if lead.last_action_utc is None:
            return TransitionCheck.denied("last_action_utc is not set")
        elapsed = days_since(lead.last_action_utc, now)
        if elapsed < days:
            return TransitionCheck.denied(f"Only {elapsed:.1f} days elapsed, need {days}")
        return TransitionCheck.ok()

    return check


def _all_of(*checks: Precondition) -> Precondition:
    def check(lead: Lead, now: datetime) -> TransitionCheck:
        for precondition in checks:
            result = precondition(lead, now)
            if not result.allowed:
                return result
        return TransitionCheck.ok()

    return check


def _mobile_valid_is(expected: bool, reason: str) -> Precondition:
    def check(lead: Lead, now: datetime) -> TransitionCheck:
        if lead.mobile_valid is expected:
            return TransitionCheck.ok()
        return TransitionCheck.denied(reason)

    return check


def _has_replied(lead: Lead, now: datetime) -> TransitionCheck:
    if lead.replied_at_utc is not None:
        return TransitionCheck.ok()
    return TransitionCheck.denied("replied_at_utc must be set")


# Side effects


def _next(
    action: Optional[str],
    due_in_days: Optional[int] = None,
    **extra: Any,
) -> SideEffectResolver:
    """Build a resolver setting next_action and its due time (None = due now)."""

    def resolve(lead: Lead, now: datetime) -> SideEffects:
        due = now + timedelta(days=due_in_days) if due_in_days is not None else None
        return {"next_action": action, "next_action_due_utc": due, **extra}

    return resolve


_qualify = _next("qualify_lead")
_close_out_not_interested = _next("close_out", qualified=False)

_ACTIVE_STATUSES = (
    S.NEW,
    S.CONTACTED_1,
    S.WAITING_D2,
    S.CALL_DUE,
    S.CALLED,
    S.WAITING_D1,
    S.CONTACTED_2,
    S.WA_VOICE_DUE,
)

_rules: dict[tuple[LeadStatus, LeadStatus], TransitionRule] = {
    # First touch done
    (S.NEW, S.CONTACTED_1): TransitionRule(
        _flag_set("email_sent_1", "email_sent_1 must be true before advancing to CONTACTED_1"),
        _next("wait_for_call_window", 2),
    ),
    # Auto-chained
    (S.CONTACTED_1, S.WAITING_D2): TransitionRule(_always, _next("call", 2)),
    # Scheduler: two days after first touch
    (S.WAITING_D2, S.CALL_DUE): TransitionRule(_elapsed_days(2), _next("call_lead")),
    (S.CALL_DUE, S.CALLED): TransitionRule(
        _flag_set("call_done", "call_done must be true before advancing to CALLED"),
        _next("wait_for_followup_window", 1),
    ),
    # Auto-chained
    (S.CALLED, S.WAITING_D1): TransitionRule(_always, _next("follow_up_email_dm", 1)),
    # Scheduler: one day after the call, follow-up already sent
    (S.WAITING_D1, S.CONTACTED_2): TransitionRule(
        _all_of(_flag_set("email_sent_2", "email_sent_2 must be true"), _elapsed_days(1)),
        _next("wa_voice_note_or_complete", 1),
    ),
    (S.CONTACTED_2, S.WA_VOICE_DUE): TransitionRule(
        _mobile_valid_is(True, "mobile_valid must be true for WA voice step"),
        _next("send_wa_voice_note"),
    ),
    (S.CONTACTED_2, S.COMPLETED): TransitionRule(
        _mobile_valid_is(False, "mobile_valid must be false to skip WA step"),
        _next(None, outcome="pipeline_complete_no_mobile"),
    ),
    (S.WA_VOICE_DUE, S.COMPLETED): TransitionRule(
        _flag_set("wa_voice_sent", "wa_voice_sent must be true before completing"),
        _next(None, outcome="pipeline_complete"),
    ),
    # Classification
    (S.REPLIED, S.QUALIFIED): TransitionRule(_always, _next("close_out", qualified=True)),
    (S.REPLIED, S.NOT_INTERESTED): TransitionRule(_always, _close_out_not_interested),
    (S.QUALIFIED, S.COMPLETED): TransitionRule(_always, _next(None, outcome="qualified_complete")),
    (S.NOT_INTERESTED, S.COMPLETED): TransitionRule(
        _always, _next(None, outcome="not_interested_complete")
    ),
}

# Interrupts
for _status in _ACTIVE_STATUSES:
    _rules[(_status, S.REPLIED)] = TransitionRule(_has_replied, _qualify)
    _rules[(_status, S.NOT_INTERESTED)] = TransitionRule(_always, _close_out_not_interested)

RULES: Mapping[tuple[LeadStatus, LeadStatus], TransitionRule] = MappingProxyType(_rules)


def get_rule(from_status: LeadStatus, to_status: LeadStatus) -> Optional[TransitionRule]:
    return RULES.get((from_status, to_status))


def missing_rules() -> list[str]:
    """
    List adjacent pairs that have no rule.

    Returns:
        Rule keys of every legal transition lacking a rule (empty when complete)
    """
    return [
        rule_key(source, target)
        for source, target in adjacent_pairs()
        if (source, target) not in RULES
    ]
