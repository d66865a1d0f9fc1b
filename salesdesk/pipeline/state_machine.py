"""Stage transition rules and their side effects on leads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from salesdesk.core.enums import LeadStage, LeadStatus
from salesdesk.models.base import utcnow
from salesdesk.pipeline.stages import ORDERED_STAGES, TERMINAL_STAGE, next_stage, parse_stage, rank


class InvalidTransitionError(ValueError):
    """Raised when a disallowed state transition is attempted."""


class StateMachine:
    """Simple transition table keyed by state value."""

    def __init__(self, transitions: dict[str, set[str]]) -> None:
        self._transitions = transitions

    def can_transition(self, current: str, target: str) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {current} -> {target}")


class StagedLead(Protocol):
    stage: LeadStage
    status: LeadStatus
    days_in_stage: int
    stage_entered_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TransitionResult:
    changed: bool
    from_stage: LeadStage
    to_stage: LeadStage


def build_stage_transitions(allow_regression: bool = True) -> dict[str, set[str]]:
    """Forward moves (adjacent or skipping) are always legal; backward moves only when allowed."""
    transitions: dict[str, set[str]] = {}
    for current in ORDERED_STAGES:
        transitions[current.value] = {
            target.value
            for target in ORDERED_STAGES
            if target is not current and (allow_regression or rank(target) > rank(current))
        }
    return transitions


class PipelineStateMachine:
    """Applies stage moves to lead-shaped objects in place."""

    def __init__(self, allow_regression: bool = True) -> None:
        self.allow_regression = allow_regression
        self._machine = StateMachine(build_stage_transitions(allow_regression))

    def can_move(self, current: LeadStage | str, target: LeadStage | str) -> bool:
        return self._machine.can_transition(parse_stage(current).value, parse_stage(target).value)

    def advance(self, lead: StagedLead, now: datetime | None = None) -> TransitionResult:
        """Move to the next stage; no-op at the terminal stage."""
        current = parse_stage(lead.stage)
        successor = next_stage(current)
        if successor is None:
            return TransitionResult(changed=False, from_stage=current, to_stage=current)
        return self._apply(lead, current, successor, now)

    def move(self, lead: StagedLead, target: LeadStage | str, now: datetime | None = None) -> TransitionResult:
        """Move directly to `target`. Dropping a lead on its own stage changes nothing."""
        current = parse_stage(lead.stage)
        destination = parse_stage(target)
        if destination is current:
            return TransitionResult(changed=False, from_stage=current, to_stage=current)
        self._machine.assert_transition(current.value, destination.value)
        return self._apply(lead, current, destination, now)

    @staticmethod
    def _apply(lead: StagedLead, current: LeadStage, destination: LeadStage, now: datetime | None) -> TransitionResult:
        moment = now or utcnow()
        lead.stage = destination
        lead.days_in_stage = 0
        lead.stage_entered_at = moment
        lead.updated_at = moment
        if destination is TERMINAL_STAGE:
            lead.status = LeadStatus.FECHADO
        return TransitionResult(changed=True, from_stage=current, to_stage=destination)
