"""Explicit total order over lead pipeline stages."""

from __future__ import annotations

from salesdesk.core.enums import LeadStage

STAGE_RANK: dict[LeadStage, int] = {
    LeadStage.PROSPECCAO: 0,
    LeadStage.DIAGNOSTICO: 1,
    LeadStage.NEGOCIACAO: 2,
    LeadStage.FECHAMENTO: 3,
    LeadStage.C7: 4,
}

ORDERED_STAGES: tuple[LeadStage, ...] = tuple(sorted(STAGE_RANK, key=STAGE_RANK.__getitem__))
INITIAL_STAGE = ORDERED_STAGES[0]
TERMINAL_STAGE = ORDERED_STAGES[-1]

STAGE_TITLES: dict[LeadStage, str] = {
    LeadStage.PROSPECCAO: "Prospecção",
    LeadStage.DIAGNOSTICO: "Diagnóstico",
    LeadStage.NEGOCIACAO: "Negociação",
    LeadStage.FECHAMENTO: "Fechamento",
    LeadStage.C7: "C7 - Fechado",
}


def parse_stage(value: LeadStage | str) -> LeadStage:
    """Coerce a raw stage value, raising ValueError for unknown stages."""
    if isinstance(value, LeadStage):
        return value
    return LeadStage(str(value).strip().lower())


def rank(stage: LeadStage | str) -> int:
    return STAGE_RANK[parse_stage(stage)]


def is_terminal(stage: LeadStage | str) -> bool:
    return parse_stage(stage) is TERMINAL_STAGE


def next_stage(stage: LeadStage | str) -> LeadStage | None:
    """Successor in pipeline order, or None at the terminal stage."""
    position = rank(stage)
    if position + 1 >= len(ORDERED_STAGES):
        return None
    return ORDERED_STAGES[position + 1]

