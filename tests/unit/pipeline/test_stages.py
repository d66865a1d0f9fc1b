from __future__ import annotations

import pytest

from salesdesk.core.enums import LeadStage
from salesdesk.pipeline.stages import ORDERED_STAGES, STAGE_RANK, is_terminal, next_stage, parse_stage, rank


def test_stage_order_is_explicit_and_total():
    assert ORDERED_STAGES == (
        LeadStage.PROSPECCAO,
        LeadStage.DIAGNOSTICO,
        LeadStage.NEGOCIACAO,
        LeadStage.FECHAMENTO,
        LeadStage.C7,
    )
    assert sorted(STAGE_RANK.values()) == list(range(len(LeadStage)))


def test_next_stage_walks_pipeline_and_stops_at_terminal():
    assert next_stage(LeadStage.PROSPECCAO) is LeadStage.DIAGNOSTICO
    assert next_stage("fechamento") is LeadStage.C7
    assert next_stage(LeadStage.C7) is None
    assert is_terminal("c7") is True
    assert is_terminal(LeadStage.NEGOCIACAO) is False


def test_parse_stage_normalizes_and_rejects_unknown():
    assert parse_stage(" Negociacao ") is LeadStage.NEGOCIACAO
    assert rank("diagnostico") == 1
    with pytest.raises(ValueError):
        parse_stage("won")
