from __future__ import annotations

from dataclasses import dataclass

from salesdesk.core.enums import LeadStage, LeadStatus, StalenessLevel
from salesdesk.pipeline.metrics import (
    board_summary,
    classify_staleness,
    conversion_funnel,
    is_over_wip_limit,
    leads_by_stage,
    stage_value,
)


@dataclass
class Row:
    name: str
    stage: LeadStage
    value: float = 0.0
    status: LeadStatus = LeadStatus.NOVO
    company_name: str = ""
    email: str = ""


def _sample() -> list[Row]:
    return [
        Row("Ana", LeadStage.PROSPECCAO, 1000),
        Row("Bruno", LeadStage.NEGOCIACAO, 15000),
        Row("Carla", LeadStage.NEGOCIACAO, 25000),
        Row("Davi", LeadStage.FECHAMENTO, 8000),
        Row("Eva", LeadStage.C7, 12000, LeadStatus.FECHADO),
    ]


def test_negotiation_stage_aggregates_value_and_count():
    leads = _sample()
    assert stage_value(leads, LeadStage.NEGOCIACAO) == 40000
    assert len(leads_by_stage(leads)[LeadStage.NEGOCIACAO]) == 2


def test_partition_has_every_stage_and_sums_match():
    leads = _sample()
    partition = leads_by_stage(leads)

    assert list(partition) == list(LeadStage)
    assert partition[LeadStage.DIAGNOSTICO] == []
    total = sum(stage_value(leads, stage) for stage in LeadStage)
    assert total == sum(lead.value for lead in leads)


def test_staleness_thresholds():
    assert classify_staleness(20) is StalenessLevel.CRITICAL
    assert classify_staleness(5) is StalenessLevel.NORMAL
    assert classify_staleness(6) is StalenessLevel.NORMAL
    assert classify_staleness(7) is StalenessLevel.WARNING
    assert classify_staleness(13) is StalenessLevel.WARNING
    assert classify_staleness(14) is StalenessLevel.CRITICAL
    assert classify_staleness(None) is StalenessLevel.NORMAL


def test_wip_limit_only_warns_when_strictly_exceeded():
    assert is_over_wip_limit(10, 10) is False
    assert is_over_wip_limit(11, 10) is True
    assert is_over_wip_limit(99, None) is False


def test_funnel_counts_leads_at_or_beyond_each_stage():
    steps = conversion_funnel(_sample())

    assert [step.count for step in steps] == [5, 4, 4, 2, 1]
    assert steps[0].percentage == 100.0
    assert steps[-1].percentage == 20.0


def test_funnel_on_empty_set_is_zero():
    assert all(step.count == 0 and step.percentage == 0.0 for step in conversion_funnel([]))


def test_board_summary_flags_columns_over_limit():
    leads = [Row(f"Lead {i}", LeadStage.NEGOCIACAO, 100) for i in range(3)]

    board = board_summary(leads, {"negociacao": 2, "diagnostico": 5})
    column = {summary.stage: summary for summary in board}

    assert [summary.stage for summary in board] == list(LeadStage)
    assert column[LeadStage.NEGOCIACAO].over_wip_limit is True
    assert column[LeadStage.NEGOCIACAO].total_value == 300
    assert column[LeadStage.DIAGNOSTICO].over_wip_limit is False
    assert column[LeadStage.PROSPECCAO].wip_limit is None
