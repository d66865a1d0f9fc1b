from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

import pytest

from salesdesk.core.enums import LeadStage, LeadStatus
from salesdesk.pipeline.stages import next_stage
from salesdesk.pipeline.state_machine import InvalidTransitionError, PipelineStateMachine, StateMachine

EARLIER = datetime(2026, 1, 1, tzinfo=timezone.utc)
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class FakeLead:
    stage: LeadStage = LeadStage.PROSPECCAO
    status: LeadStatus = LeadStatus.NOVO
    value: float = 15000.0
    days_in_stage: int = 9
    stage_entered_at: datetime = EARLIER
    updated_at: datetime = EARLIER
    notes: list[str] = field(default_factory=list)


def test_state_machine_allows_valid_transition():
    sm = StateMachine({"novo": {"contato"}, "contato": {"fechado"}})
    assert sm.can_transition("novo", "contato") is True
    sm.assert_transition("novo", "contato")


def test_state_machine_rejects_invalid_transition():
    sm = StateMachine({"novo": {"contato"}})
    with pytest.raises(InvalidTransitionError):
        sm.assert_transition("novo", "fechado")


def test_advance_four_times_reaches_c7_and_closes():
    lead = FakeLead()
    machine = PipelineStateMachine()

    for _ in range(4):
        previous = lead.stage
        result = machine.advance(lead, now=NOW)
        assert result.changed is True
        assert lead.stage is next_stage(previous)
        assert lead.days_in_stage == 0

    assert lead.stage is LeadStage.C7
    assert lead.status is LeadStatus.FECHADO
    assert lead.days_in_stage == 0
    assert lead.stage_entered_at == NOW


def test_advance_at_terminal_stage_changes_nothing():
    lead = FakeLead(stage=LeadStage.C7, status=LeadStatus.FECHADO, days_in_stage=3)
    before = replace(lead)

    result = PipelineStateMachine().advance(lead, now=NOW)

    assert result.changed is False
    assert lead == before


def test_advance_only_closes_status_on_reaching_c7():
    lead = FakeLead(stage=LeadStage.PROSPECCAO, status=LeadStatus.CONTATO)
    PipelineStateMachine().advance(lead, now=NOW)
    assert lead.status is LeadStatus.CONTATO


def test_move_to_other_stage_resets_days_and_stamps_time():
    lead = FakeLead(stage=LeadStage.DIAGNOSTICO, days_in_stage=12)

    result = PipelineStateMachine().move(lead, LeadStage.FECHAMENTO, now=NOW)

    assert result.changed is True
    assert (result.from_stage, result.to_stage) == (LeadStage.DIAGNOSTICO, LeadStage.FECHAMENTO)
    assert lead.days_in_stage == 0
    assert lead.updated_at == NOW


def test_move_to_own_stage_is_a_complete_noop():
    lead = FakeLead(stage=LeadStage.NEGOCIACAO, days_in_stage=12)
    before = replace(lead)

    result = PipelineStateMachine().move(lead, "negociacao", now=NOW + timedelta(days=1))

    assert result.changed is False
    assert lead == before


def test_backward_move_allowed_by_default_and_keeps_closed_status():
    lead = FakeLead(stage=LeadStage.C7, status=LeadStatus.FECHADO, days_in_stage=4)

    PipelineStateMachine().move(lead, LeadStage.DIAGNOSTICO, now=NOW)

    assert lead.stage is LeadStage.DIAGNOSTICO
    assert lead.status is LeadStatus.FECHADO
    assert lead.days_in_stage == 0


def test_backward_move_rejected_when_regression_disabled():
    lead = FakeLead(stage=LeadStage.FECHAMENTO, days_in_stage=4)
    machine = PipelineStateMachine(allow_regression=False)

    assert machine.can_move(LeadStage.FECHAMENTO, LeadStage.PROSPECCAO) is False
    with pytest.raises(InvalidTransitionError):
        machine.move(lead, LeadStage.PROSPECCAO, now=NOW)
    assert lead.stage is LeadStage.FECHAMENTO
    assert lead.days_in_stage == 4

    machine.move(lead, LeadStage.C7, now=NOW)
    assert lead.stage is LeadStage.C7
