from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from salesdesk.core.enums import LeadStage, LeadStatus, StalenessLevel
from salesdesk.models.base import utcnow
from salesdesk.pipeline.metrics import classify_staleness
from salesdesk.services.base_service import ERROR_BACKEND, ERROR_NOT_FOUND, ERROR_TRANSITION, ERROR_VALIDATION
from salesdesk.services.lead_service import LeadService


def _lead_data(**overrides):
    data = {
        "name": "Maria Santos",
        "company_name": "Tech Solutions",
        "email": "maria@tech.com",
        "phone": "(11) 99999-0000",
        "value": 15000,
    }
    data.update(overrides)
    return data


def test_create_applies_defaults(db_session):
    service = LeadService(db=db_session, allow_regression=True)

    result = service.create(_lead_data(), actor_id=None)

    assert result.success is True
    lead = result.data
    assert lead.stage is LeadStage.PROSPECCAO
    assert lead.status is LeadStatus.NOVO
    assert lead.days_in_stage == 0
    assert lead.value == 15000
    assert service.get(lead.id) is not None


def test_create_rejects_missing_fields_without_writing(db_session):
    service = LeadService(db=db_session, allow_regression=True)

    result = service.create(_lead_data(phone="  "))

    assert result.success is False
    assert result.error_kind == ERROR_VALIDATION
    assert "phone" in result.error
    assert service.load().data == []


def test_create_value_parsing(db_session):
    service = LeadService(db=db_session, allow_regression=True)

    assert service.create(_lead_data(value="abc")).data.value == 0
    assert service.create(_lead_data(value="1500,50")).data.value == 1500.5
    negative = service.create(_lead_data(value=-1))
    assert negative.success is False
    assert negative.error_kind == ERROR_VALIDATION


def test_create_directly_at_c7_forces_closed_status(db_session):
    service = LeadService(db=db_session, allow_regression=True)

    lead = service.create(_lead_data(stage="c7", status="contato")).data

    assert lead.stage is LeadStage.C7
    assert lead.status is LeadStatus.FECHADO


def test_advance_four_times_persists_and_audits(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data()).data

    for _ in range(4):
        assert service.advance(lead.id, actor="user-1").success is True

    stored = service.get(lead.id)
    assert stored.stage is LeadStage.C7
    assert stored.status is LeadStatus.FECHADO
    assert stored.days_in_stage == 0
    history = service.history(lead.id)
    assert [(row.from_stage, row.to_stage) for row in history] == [
        (LeadStage.PROSPECCAO, LeadStage.DIAGNOSTICO),
        (LeadStage.DIAGNOSTICO, LeadStage.NEGOCIACAO),
        (LeadStage.NEGOCIACAO, LeadStage.FECHAMENTO),
        (LeadStage.FECHAMENTO, LeadStage.C7),
    ]
    assert all(row.actor == "user-1" for row in history)

    final = service.advance(lead.id)
    assert final.success is True
    assert final.changed is False
    assert len(service.history(lead.id)) == 4


def test_request_move_same_stage_is_noop(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data(stage="negociacao")).data
    before = service.get(lead.id).updated_at

    result = service.request_move(lead.id, "negociacao")

    assert result.success is True
    assert result.changed is False
    assert result.data.updated_at == before
    assert service.history(lead.id) == []


def test_request_move_backward_respects_regression_setting(db_session):
    lead = LeadService(db=db_session, allow_regression=True).create(_lead_data(stage="fechamento")).data

    strict = LeadService(db=db_session, allow_regression=False)
    rejected = strict.request_move(lead.id, LeadStage.PROSPECCAO)
    assert rejected.success is False
    assert rejected.error_kind == ERROR_TRANSITION
    assert rejected.data.stage is LeadStage.FECHAMENTO

    relaxed = LeadService(db=db_session, allow_regression=True)
    moved = relaxed.request_move(lead.id, LeadStage.PROSPECCAO)
    assert moved.success is True
    assert moved.data.stage is LeadStage.PROSPECCAO


def test_request_move_unknown_lead_or_stage(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data()).data

    assert service.request_move("missing", "c7").error_kind == ERROR_NOT_FOUND
    assert service.request_move(lead.id, "won").error_kind == ERROR_VALIDATION


def test_update_routes_stage_change_through_state_machine(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data()).data

    result = service.update(lead.id, {"stage": "c7", "notes": "signed"}, actor="user-2")

    assert result.success is True
    assert result.data.status is LeadStatus.FECHADO
    assert result.data.notes == "signed"
    assert len(service.history(lead.id)) == 1


def test_update_rejects_id_change_and_blank_required_field(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data()).data

    assert service.update(lead.id, {"id": "other"}).error_kind == ERROR_VALIDATION
    blank = service.update(lead.id, {"name": "", "value": 99})
    assert blank.error_kind == ERROR_VALIDATION
    stored = service.get(lead.id)
    assert stored.name == "Maria Santos"
    assert stored.value == 15000


def test_update_without_effective_change_is_noop(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data()).data
    before = service.get(lead.id).updated_at

    same_stage = service.update(lead.id, {"stage": "prospeccao"})
    empty = service.update(lead.id, {})
    same_values = service.update(lead.id, {"name": "  Maria Santos ", "value": "15000", "status": "novo"})

    for result in (same_stage, empty, same_values):
        assert result.success is True
        assert result.changed is False
    stored = service.get(lead.id)
    assert stored.updated_at == before
    assert stored.days_in_stage == 0
    assert service.history(lead.id) == []

    renamed = service.update(lead.id, {"name": "Maria S."})
    assert renamed.changed is True
    assert renamed.data.updated_at >= before


def test_update_refused_regression_leaves_lead_untouched(db_session):
    service = LeadService(db=db_session, allow_regression=False)
    lead = service.create(_lead_data(stage="fechamento")).data

    result = service.update(lead.id, {"stage": "diagnostico", "notes": "rollback me"})

    assert result.error_kind == ERROR_TRANSITION
    assert result.data.stage is LeadStage.FECHAMENTO
    assert result.data.notes is None


def test_failed_write_returns_authoritative_state(db_session, monkeypatch):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data()).data

    def broken_commit():
        db_session.rollback()
        raise OperationalError("UPDATE leads", {}, Exception("database is locked"))

    monkeypatch.setattr(service, "commit", broken_commit)
    result = service.advance(lead.id)

    assert result.success is False
    assert result.error_kind == ERROR_BACKEND
    assert result.data.stage is LeadStage.PROSPECCAO
    assert service.history(lead.id) == []


def test_delete_is_hard_and_removes_history(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data()).data
    service.advance(lead.id)

    assert service.delete(lead.id).success is True
    assert service.get(lead.id) is None
    assert service.history(lead.id) == []
    assert service.delete(lead.id).error_kind == ERROR_NOT_FOUND


def test_search_board_and_funnel(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    service.create(_lead_data(stage="negociacao", value=15000))
    service.create(_lead_data(name="Carlos Lima", email="carlos@lima.com", company_name="Lima SA", stage="negociacao", value=25000))
    service.create(_lead_data(name="Paula Dias", email="paula@dias.com", company_name="Dias ME"))

    assert len(service.search(search="maria").data) == 1
    board = {column.stage: column for column in service.board(wip_limits={"negociacao": 1}).data}
    assert board[LeadStage.NEGOCIACAO].count == 2
    assert board[LeadStage.NEGOCIACAO].total_value == 40000
    assert board[LeadStage.NEGOCIACAO].over_wip_limit is True
    assert service.funnel().data[2].count == 2


def test_refresh_days_in_stage_recomputes_aging(db_session):
    service = LeadService(db=db_session, allow_regression=True)
    stale = service.create(_lead_data()).data
    fresh = service.create(_lead_data(name="Novo", email="novo@x.com")).data
    now = utcnow()
    stale.stage_entered_at = now - timedelta(days=20)
    fresh.stage_entered_at = now - timedelta(days=5)
    db_session.commit()

    result = service.refresh_days_in_stage(now=now)

    assert result.success is True
    assert result.data == 2
    assert classify_staleness(service.get(stale.id).days_in_stage) is StalenessLevel.CRITICAL
    assert classify_staleness(service.get(fresh.id).days_in_stage) is StalenessLevel.NORMAL


@pytest.mark.parametrize("stage", ["diagnostico", "c7"])
def test_stage_change_resets_aging(db_session, stage):
    service = LeadService(db=db_session, allow_regression=True)
    lead = service.create(_lead_data(stage="negociacao")).data
    lead.days_in_stage = 30
    db_session.commit()

    assert service.request_move(lead.id, stage).data.days_in_stage == 0
