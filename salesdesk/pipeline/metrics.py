"""Derived pipeline queries, recomputed from the full lead set on demand."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from salesdesk.core.enums import LeadStage, StalenessLevel
from salesdesk.pipeline.stages import INITIAL_STAGE, ORDERED_STAGES, STAGE_TITLES, parse_stage, rank

WARNING_AFTER_DAYS = 7
CRITICAL_AFTER_DAYS = 14


def _value_of(lead: Any) -> float:
    return float(lead.value or 0)


def leads_by_stage(leads: Iterable[Any]) -> dict[LeadStage, list[Any]]:
    """Partition leads by stage; every stage is present, possibly empty."""
    partition: dict[LeadStage, list[Any]] = {stage: [] for stage in ORDERED_STAGES}
    for lead in leads:
        partition[parse_stage(lead.stage)].append(lead)
    return partition


def stage_value(leads: Iterable[Any], stage: LeadStage | str) -> float:
    target = parse_stage(stage)
    return round(sum(_value_of(lead) for lead in leads if parse_stage(lead.stage) is target), 2)


def is_over_wip_limit(count: int, limit: int | None) -> bool:
    """Soft cap: only strictly exceeding the limit warns, and nothing is blocked."""
    return limit is not None and count > limit


def classify_staleness(days_in_stage: int | None) -> StalenessLevel:
    days = days_in_stage or 0
    if days >= CRITICAL_AFTER_DAYS:
        return StalenessLevel.CRITICAL
    if days >= WARNING_AFTER_DAYS:
        return StalenessLevel.WARNING
    return StalenessLevel.NORMAL


@dataclass(frozen=True)
class FunnelStep:
    stage: LeadStage
    count: int
    percentage: float


def conversion_funnel(leads: Iterable[Any]) -> list[FunnelStep]:
    """Leads at or beyond each stage, as a percentage of the initial stage's count."""
    ranks = [rank(lead.stage) for lead in leads]
    base = sum(1 for value in ranks if value >= rank(INITIAL_STAGE))
    steps: list[FunnelStep] = []
    for stage in ORDERED_STAGES:
        reached = sum(1 for value in ranks if value >= rank(stage))
        percentage = round(reached / base * 100.0, 2) if base else 0.0
        steps.append(FunnelStep(stage=stage, count=reached, percentage=percentage))
    return steps


@dataclass
class StageSummary:
    stage: LeadStage
    title: str
    count: int
    total_value: float
    wip_limit: int | None
    over_wip_limit: bool
    leads: list[Any] = field(default_factory=list)


def board_summary(leads: Iterable[Any], wip_limits: Mapping[str, int] | None = None) -> list[StageSummary]:
    """Kanban view model: one column per stage in pipeline order."""
    limits = wip_limits or {}
    summaries: list[StageSummary] = []
    for stage, stage_leads in leads_by_stage(leads).items():
        limit = limits.get(stage.value)
        summaries.append(
            StageSummary(
                stage=stage,
                title=STAGE_TITLES[stage],
                count=len(stage_leads),
                total_value=round(sum(_value_of(lead) for lead in stage_leads), 2),
                wip_limit=limit,
                over_wip_limit=is_over_wip_limit(len(stage_leads), limit),
                leads=stage_leads,
            )
        )
    return summaries
